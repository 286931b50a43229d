import json
import logging
import sys
import argparse

try:
    from rich.console import Console
    from rich.logging import RichHandler
    from rich.markup import escape
    from rich.panel import Panel
    from rich.tree import Tree as RichTree
except ImportError:
    print("Error: The 'rich' library is required for the CLI but not installed.", file=sys.stderr)
    print("Please install it with: pip install dragtree[cli]", file=sys.stderr)
    sys.exit(1)

from dragtreelib import __version__
from dragtreelib.config import default_config, load_preset, merge_configs, validate_config
from dragtreelib.events import GESTURE_COMMIT, GESTURE_PREVIEW, EventBus
from dragtreelib.models import (
    DragTreeError,
    EntryKind,
    Group,
    GroupPosition,
    Item,
    Point,
    Rect,
    RootPosition,
    TargetKind,
)
from dragtreelib.rendering import item_label
from dragtreelib.resolver import move
from dragtreelib.serialization import load_tree, save_tree, tree_to_dict
from dragtreelib.session import DragSession
from dragtreelib.tree import add_group, add_item, demo_tree, remove_group, remove_item

console = Console()
err_console = Console(stderr=True)


# ---------------------------------------------------------------------------
# Argument types
# ---------------------------------------------------------------------------

def destination(value):
    """``root:N`` or ``group:GROUP_ID:N``."""
    head, _, rest = value.partition(":")
    try:
        if head == "root" and rest:
            return RootPosition(int(rest))
        if head == "group" and ":" in rest:
            group_id, _, index = rest.rpartition(":")
            if group_id:
                return GroupPosition(group_id, int(index))
    except ValueError:
        pass
    raise argparse.ArgumentTypeError(
        f"invalid destination '{value}' (expected root:N or group:ID:N)")


def numbers(count):
    def parse(value):
        try:
            parts = [float(p) for p in value.split(",")]
        except ValueError:
            parts = []
        if len(parts) != count:
            raise argparse.ArgumentTypeError(
                f"expected {count} comma-separated numbers, got '{value}'")
        return parts
    return parse


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        description="Reorder and regroup a two-level item/group tree",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--version", action="version",
                        version=f"dragtree {__version__}")

    parser.add_argument("tree", type=str, nargs="?",
                        help="Tree JSON file")
    parser.add_argument("--demo", action="store_true",
                        help="Start from the built-in demo tree instead of a file")

    # Shell edits
    parser.add_argument("--add-group", metavar="ID",
                        help="Add an empty group")
    parser.add_argument("--title", default="",
                        help="Title for --add-group")
    parser.add_argument("--at", type=int, default=None,
                        help="Root index for --add-group (default: append)")
    parser.add_argument("--add-item", metavar="ID",
                        help="Add an item")
    parser.add_argument("--content", default=None,
                        help="Content for --add-item")
    parser.add_argument("--into", type=destination, default=None,
                        help="Destination for --add-item (default: append to root)")
    parser.add_argument("--remove-item", metavar="ID",
                        help="Remove an item")
    parser.add_argument("--remove-group", metavar="ID",
                        help="Remove a group, moving its items to the root")

    # Moves
    parser.add_argument("--move", metavar="ID",
                        help="Element to move directly to --to")
    parser.add_argument("--to", type=destination,
                        help="Destination for --move: root:N or group:ID:N")

    # Simulated gesture
    parser.add_argument("--drag", metavar="ID",
                        help="Element to drag through a full gesture")
    parser.add_argument("--over", metavar="ID", default=None,
                        help="Hovered element for --drag (omit for empty space)")
    parser.add_argument("--over-kind", choices=[k.value for k in TargetKind],
                        default=None,
                        help="Explicit kind of the hovered element (needed for drop markers)")
    parser.add_argument("--rect", type=numbers(4), default=None,
                        help="Hovered bounding box X,Y,W,H")
    parser.add_argument("--pointer", type=numbers(2), default=None,
                        help="Pointer position X,Y")

    # Config & output
    parser.add_argument("--preset", type=str, default=None,
                        help="Classifier config preset (JSON)")
    parser.add_argument("-o", "--output", type=str, default=None,
                        help="Write the resulting tree to this JSON file")
    parser.add_argument("--json", action="store_true",
                        help="Print the persisted JSON shape instead of a tree view")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Debug logging and gesture traces")

    args = parser.parse_args(argv)

    if not args.tree and not args.demo:
        parser.error("a tree file or --demo is required")
    if args.move and args.to is None:
        parser.error("--move requires --to")
    if args.drag and args.pointer is None:
        parser.error("--drag requires --pointer")

    return args


def setup_logging(verbose):
    logging.basicConfig(
        level=logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    # -v traces moves, drop targets and gesture commits from the library
    logging.getLogger("dragtreelib").setLevel(
        logging.DEBUG if verbose else logging.NOTSET)


# ---------------------------------------------------------------------------
# Rich console rendering (CLI-only, not in the library)
# ---------------------------------------------------------------------------

def build_rich_tree(tree, title="root"):
    view = RichTree(f"[bold]{escape(title)}[/]")
    for entry in tree.root:
        if entry.kind is EntryKind.ITEM:
            view.add(escape(item_label(tree.items[entry.id])))
            continue
        group = tree.groups[entry.id]
        branch = view.add(
            f"[bold cyan]{escape(group.title or group.id)}[/] [dim]({escape(group.id)})[/]")
        for child in group.children:
            branch.add(escape(item_label(tree.items[child])))
        if not group.children:
            branch.add("[dim](empty)[/]")
    return view


def describe_destination(dest):
    if isinstance(dest, GroupPosition):
        return f"group {dest.group_id} @ {dest.index}"
    return f"root @ {dest.index}"


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def run_gesture(tree, args, config):
    bus = EventBus()

    def on_preview(element_id, destination, **_):
        console.print(f"[dim]preview {escape(element_id)} -> {describe_destination(destination)}[/]")

    def on_commit(element_id, destination, changed, **_):
        state = "[green]moved[/]" if changed else "[yellow]unchanged[/]"
        console.print(f"[dim]commit {escape(element_id)} -> {describe_destination(destination)}[/] {state}")

    bus.subscribe(GESTURE_PREVIEW, on_preview)
    bus.subscribe(GESTURE_COMMIT, on_commit)

    session = DragSession(tree, config=config, event_bus=bus)
    if not session.on_gesture_start(args.drag):
        raise DragTreeError(f"Cannot drag '{args.drag}': not in tree")

    rect = Rect(*args.rect) if args.rect else None
    over_kind = TargetKind(args.over_kind) if args.over_kind else None
    session.on_gesture_move(args.over, rect, Point(*args.pointer), over_kind=over_kind)
    return session.on_gesture_end()


def main(argv=None):
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    try:
        config = default_config()
        if args.preset:
            config = merge_configs(config, load_preset(args.preset))
            validate_config(config)

        tree = demo_tree() if args.demo else load_tree(args.tree)

        if args.add_group:
            at = len(tree.root) if args.at is None else args.at
            tree = add_group(tree, at, Group(args.add_group, args.title))
        if args.add_item:
            into = args.into or RootPosition(len(tree.root))
            tree = add_item(tree, into, Item(args.add_item, args.content))
        if args.remove_item:
            tree = remove_item(tree, args.remove_item)
        if args.remove_group:
            tree = remove_group(tree, args.remove_group)
        if args.move:
            tree = move(tree, args.move, args.to)
        if args.drag:
            tree = run_gesture(tree, args, config)

        if args.output:
            save_tree(tree, args.output)
    except DragTreeError as e:
        console.print(f"[bold red]Error:[/] {escape(str(e))}")
        return 1

    if args.json:
        console.print_json(json.dumps(tree_to_dict(tree)))
    else:
        source = "demo" if args.demo else args.tree
        console.print(Panel.fit(build_rich_tree(tree), title=f"dragtree: {escape(source)}"))
        if args.output:
            console.print(f"\n[dim]Tree saved to: {escape(args.output)}[/]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
