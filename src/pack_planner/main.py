"""
Pack Planner command-line interface.

Simple command-line interface over the gear catalog and hike packing
lists. Weights are entered and shown in the configured unit system
unless --imperial or --metric is given.

Usage Examples:
    # Create the database
    pack-planner init

    # Add gear (weight in ounces with --imperial, grams otherwise)
    pack-planner gear add "Tent" --weight 1250 --category Shelter

    # Wide search over name, description and category
    pack-planner gear list --search shelter --wide

    # Pack gear and print the weight report
    pack-planner hike create "Enchantments"
    pack-planner hike add-gear 1 1 --quantity 2
    pack-planner --imperial hike report 1 --pending

    # Mark packed gear (IDs in brackets in the report) as worn and verified
    pack-planner hike set 1 1 --worn --verified
    pack-planner hike remove-gear 1 1
"""

import argparse
import sys
from typing import List, Optional

from pack_planner.services import gear_service, hike_service
from pack_planner.services.database import initialize_app_database
from pack_planner.services.dto import GearItem, HikeGearAssignment
from pack_planner.services.exceptions import ServiceError
from pack_planner.services.gear_catalog import GearCatalog
from pack_planner.services.hike_aggregator import WeightKind
from pack_planner.services.unit_converter import to_display_value, unit_label
from pack_planner.utils.config import get_config


def _format_unit_weight(weight_grams: float, imperial: bool) -> str:
    value = to_display_value(weight_grams, imperial)
    return f"{value:.1f} {'oz' if imperial else 'g'}"


def _flags(assignment: HikeGearAssignment) -> str:
    marks = (
        ("W", assignment.worn),
        ("C", assignment.consumable),
        ("V", assignment.verified),
    )
    return "".join(mark for mark, on in marks if on)


# ============================================================================
# Gear Commands
# ============================================================================


def gear_list(search: Optional[str], wide: bool, imperial: bool) -> int:
    """List gear grouped by category."""
    if wide:
        items = [GearItem.from_model(gear) for gear in gear_service.search_gear(search or "")]
        index = GearCatalog(items).filtered()
    else:
        index = gear_service.load_catalog().filtered(search or "")

    if index.is_empty():
        print("No gear found.")
        return 0

    for category, items in index.sections():
        print(f"{category}:")
        for item in items:
            print(f"  [{item.id}] {item.name} ({_format_unit_weight(item.weight_grams, imperial)})")
    return 0


def gear_add(
    name: str,
    weight: float,
    category: Optional[str],
    description: Optional[str],
    imperial: bool,
) -> int:
    """Add a gear item."""
    gear = gear_service.create_gear(
        name,
        description=description or "",
        weight=weight,
        category=category,
        imperial=imperial,
    )
    print(f"Added gear [{gear.id}] {gear.name} ({gear.category})")
    return 0


def gear_delete(gear_id: int) -> int:
    """Delete a gear item and its hike entries."""
    removed = gear_service.delete_gear(gear_id)
    print(f"Deleted gear {gear_id} ({removed} hike entries removed)")
    return 0


# ============================================================================
# Hike Commands
# ============================================================================


def hike_list(search: Optional[str]) -> int:
    """List hikes."""
    hikes = hike_service.search_hikes(search or "")
    if not hikes:
        print("No hikes found.")
        return 0

    for hike in hikes:
        status = " (completed)" if hike.completed else ""
        print(f"[{hike.id}] {hike.name}{status}")
    return 0


def hike_create(name: str) -> int:
    """Create a hike."""
    hike = hike_service.create_hike(name)
    print(f"Created hike [{hike.id}] {hike.name}")
    return 0


def hike_add_gear(hike_id: int, gear_id: int, quantity: int) -> int:
    """Pack gear for a hike."""
    hike_gear = hike_service.add_gear_to_hike(hike_id, gear_id, quantity=quantity)
    if hike_gear is None:
        print(f"Gear {gear_id} is already packed for hike {hike_id}")
    else:
        print(f"Packed gear {gear_id} x{quantity} for hike {hike_id}")
    return 0


def hike_copy(hike_id: int) -> int:
    """Copy a hike with its gear."""
    copied = hike_service.copy_hike(hike_id)
    print(f"Created hike [{copied.id}] {copied.name}")
    return 0


def hike_set(
    hike_id: int,
    assignment_id: int,
    worn: bool,
    consumable: bool,
    verified: bool,
    quantity: Optional[int],
) -> int:
    """Toggle flags or change the quantity of packed gear."""
    if not (worn or consumable or verified or quantity is not None):
        print("Nothing to change: pass --worn, --consumable, --verified or --quantity")
        return 1

    aggregator = hike_service.build_aggregator(hike_id)
    assignment = None
    if worn:
        assignment = aggregator.toggle_worn(assignment_id)
    if consumable:
        assignment = aggregator.toggle_consumable(assignment_id)
    if verified:
        assignment = aggregator.toggle_verified(assignment_id)
    if quantity is not None:
        assignment = aggregator.set_quantity(assignment_id, quantity)

    print(f"Updated [{assignment.id}] x{assignment.quantity} {_flags(assignment)}".rstrip())
    return 0


def hike_remove_gear(hike_id: int, assignment_id: int) -> int:
    """Remove packed gear from a hike."""
    hike_service.build_aggregator(hike_id).remove_assignment(assignment_id)
    print(f"Removed [{assignment_id}] from hike {hike_id}")
    return 0


def hike_report(hike_id: int, pending: bool, imperial: bool) -> int:
    """Print a hike's packing list and weights."""
    aggregator = hike_service.build_aggregator(hike_id, pending_only=pending, imperial=imperial)
    hike = aggregator.hike

    print(f"{hike.name} [{unit_label(imperial)}]")
    if aggregator.is_empty():
        print("  Nothing left to pack." if pending else "  No gear packed.")

    for category, assignments in aggregator.get_category_sections():
        print(f"{category}:")
        for assignment in assignments:
            gear = assignment.gear
            name = gear.name if gear is not None else "(missing gear)"
            grams = gear.weight_grams if gear is not None else 0.0
            print(
                f"  [{assignment.id}] {name} x{assignment.quantity} "
                f"({_format_unit_weight(grams, imperial)}) {_flags(assignment)}".rstrip()
            )

    print()
    for kind in (WeightKind.TOTAL, WeightKind.BASE, WeightKind.WORN, WeightKind.CONSUMABLE):
        print(f"{kind.value.capitalize():>10}: {aggregator.get_weight_string(kind)}")
    return 0


# ============================================================================
# Entry Point
# ============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pack-planner",
        description="Gear catalog and hike packing-list weights",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    units = parser.add_mutually_exclusive_group()
    units.add_argument(
        "--imperial", dest="imperial", action="store_true", default=None, help="Use lbs/oz"
    )
    units.add_argument(
        "--metric", dest="imperial", action="store_false", default=None, help="Use kg/g"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("init", help="Create the database")

    # gear commands
    gear_parser = subparsers.add_parser("gear", help="Manage the gear catalog")
    gear_sub = gear_parser.add_subparsers(dest="gear_command")

    gear_list_parser = gear_sub.add_parser("list", help="List gear by category")
    gear_list_parser.add_argument("--search", help="Filter by name")
    gear_list_parser.add_argument(
        "--wide",
        action="store_true",
        help="Match the search against description and category too",
    )

    gear_add_parser = gear_sub.add_parser("add", help="Add a gear item")
    gear_add_parser.add_argument("name", help="Gear name")
    gear_add_parser.add_argument(
        "--weight", type=float, required=True, help="Unit weight (oz with --imperial, else g)"
    )
    gear_add_parser.add_argument("--category", help="Gear category")
    gear_add_parser.add_argument("--description", help="Description")

    gear_delete_parser = gear_sub.add_parser("delete", help="Delete a gear item")
    gear_delete_parser.add_argument("gear_id", type=int, help="Gear ID")

    # hike commands
    hike_parser = subparsers.add_parser("hike", help="Manage hikes")
    hike_sub = hike_parser.add_subparsers(dest="hike_command")

    hike_list_parser = hike_sub.add_parser("list", help="List hikes")
    hike_list_parser.add_argument("--search", help="Filter by name, description or location")

    hike_create_parser = hike_sub.add_parser("create", help="Create a hike")
    hike_create_parser.add_argument("name", help="Hike name")

    hike_add_parser = hike_sub.add_parser("add-gear", help="Pack gear for a hike")
    hike_add_parser.add_argument("hike_id", type=int, help="Hike ID")
    hike_add_parser.add_argument("gear_id", type=int, help="Gear ID")
    hike_add_parser.add_argument("--quantity", type=int, default=1, help="Number of units")

    hike_copy_parser = hike_sub.add_parser("copy", help="Copy a hike and its gear")
    hike_copy_parser.add_argument("hike_id", type=int, help="Hike ID")

    hike_set_parser = hike_sub.add_parser("set", help="Toggle flags or set quantity of packed gear")
    hike_set_parser.add_argument("hike_id", type=int, help="Hike ID")
    hike_set_parser.add_argument("assignment_id", type=int, help="Packed gear ID (from report)")
    hike_set_parser.add_argument("--worn", action="store_true", help="Toggle worn")
    hike_set_parser.add_argument("--consumable", action="store_true", help="Toggle consumable")
    hike_set_parser.add_argument("--verified", action="store_true", help="Toggle verified")
    hike_set_parser.add_argument("--quantity", type=int, help="New number of units")

    hike_remove_parser = hike_sub.add_parser("remove-gear", help="Remove packed gear from a hike")
    hike_remove_parser.add_argument("hike_id", type=int, help="Hike ID")
    hike_remove_parser.add_argument("assignment_id", type=int, help="Packed gear ID (from report)")

    hike_report_parser = hike_sub.add_parser("report", help="Show packing list and weights")
    hike_report_parser.add_argument("hike_id", type=int, help="Hike ID")
    hike_report_parser.add_argument(
        "--pending", action="store_true", help="List only gear not yet verified"
    )

    return parser


def _dispatch(args: argparse.Namespace, imperial: bool) -> Optional[int]:
    if args.command == "gear":
        if args.gear_command == "list":
            return gear_list(args.search, args.wide, imperial)
        elif args.gear_command == "add":
            return gear_add(args.name, args.weight, args.category, args.description, imperial)
        elif args.gear_command == "delete":
            return gear_delete(args.gear_id)
    elif args.command == "hike":
        if args.hike_command == "list":
            return hike_list(args.search)
        elif args.hike_command == "create":
            return hike_create(args.name)
        elif args.hike_command == "add-gear":
            return hike_add_gear(args.hike_id, args.gear_id, args.quantity)
        elif args.hike_command == "copy":
            return hike_copy(args.hike_id)
        elif args.hike_command == "set":
            return hike_set(
                args.hike_id,
                args.assignment_id,
                args.worn,
                args.consumable,
                args.verified,
                args.quantity,
            )
        elif args.hike_command == "remove-gear":
            return hike_remove_gear(args.hike_id, args.assignment_id)
        elif args.hike_command == "report":
            return hike_report(args.hike_id, args.pending, imperial)
    return None


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    imperial = args.imperial if args.imperial is not None else get_config().imperial

    # Initialize database (required for all operations)
    initialize_app_database()

    if args.command == "init":
        print(f"Database ready at {get_config().database_path}")
        return 0

    try:
        result = _dispatch(args, imperial)
    except ServiceError as e:
        print(f"ERROR: {e}")
        return 1

    if result is None:
        print(f"Unknown command: {args.command}")
        return 1
    return result


if __name__ == "__main__":
    sys.exit(main())
