"""deck-tools command line interface.

Commands:
    games       List supported games
    parse       Parse and resolve a deck list
    annotate    Write "//? " card summaries under each card line
    analyze     Summarize deck composition
    search      Find cards by name, text or traits
    pack        List the cards of a pack or set as a deck list
    fetch-data  Download (refresh) the card database cache
"""

from pathlib import Path
from typing import Optional

import click

from config.settings import settings
from core import __version__
from core.logging import get_logger, setup_logging
from errors import ValidationError
from plugins.registry import get_game, list_available_games, registry
from services.analysis import analyze_deck, format_report
from services.annotate import annotate_deck_text
from services.deck import DeckService, format_resolved_entries, split_proxy_items
from services.search import (
    SEARCH_SCOPES,
    SORT_MODES,
    SearchFilters,
    build_pack_index,
    card_summary,
    format_pack_entries,
    format_pack_list,
    format_search_annotations,
    pack_entries,
    resolve_pack,
    search_cards,
)

from .common import (
    STDIN_MARKER,
    handle_errors,
    optional_path,
    read_input_text,
    render_diagnostics,
    write_json_outputs,
    write_output_text,
)

logger = get_logger(__name__)


def game_option(func):
    return click.option(
        "--game",
        "-g",
        default="marvel",
        show_default=True,
        help="Game the deck list is for (see `deck-tools games`).",
    )(func)


def data_options(func):
    """Options shared by every command that loads card data."""
    options = [
        click.option(
            "--data-file",
            type=click.Path(dir_okay=False),
            help="Extra card rows (JSON) appended after the downloaded data.",
        ),
        click.option(
            "--cache-dir",
            type=click.Path(file_okay=False),
            help=f"Card data cache directory (default: {settings.cache_dir}).",
        ),
        click.option(
            "--refresh-data",
            is_flag=True,
            default=False,
            help="Re-download card data even when the cache is fresh.",
        ),
        click.option(
            "--max-age-days",
            type=float,
            help="Maximum cache age in days before re-downloading.",
        ),
        click.option(
            "--face",
            type=click.Choice(["a", "b"]),
            help="Face used for bare numeric Marvel codes.",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def io_options(func):
    func = click.option(
        "--output",
        "-o",
        "output_path",
        help="Output file (default: stdout).",
    )(func)
    func = click.option(
        "--input",
        "-i",
        "input_path",
        default=STDIN_MARKER,
        show_default=True,
        help="Deck list file, or - for stdin.",
    )(func)
    return func


def _service(game_name: str) -> DeckService:
    return DeckService(get_game(game_name), settings)


def _resolver(
    service: DeckService, data_file, cache_dir, refresh_data, max_age_days, face
):
    return service.build_resolver(
        refresh=refresh_data,
        data_file=optional_path(data_file),
        cache_dir=optional_path(cache_dir),
        max_age_days=max_age_days,
        default_face=face,
    )


def _parse_input(service: DeckService, input_path: str):
    if input_path == STDIN_MARKER:
        return service.parse_deck_text(read_input_text(input_path), base_dir=Path.cwd())
    return service.parse_deck_file(Path(input_path))


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="deck-tools")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show debug output.")
@click.option("--quiet", "-q", is_flag=True, default=False, help="Only show errors.")
def main(verbose: bool, quiet: bool) -> None:
    """Parse, resolve, annotate and analyze TCG deck lists."""
    level: Optional[str] = None
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "ERROR"
    setup_logging(level)


@main.command("games")
def games_command() -> None:
    """List supported games and their aliases."""
    games = list_available_games()
    plugins = {info.name: info for info in registry.list_plugins()}
    for game in games:
        info = plugins.get(game.name)
        names = info.aliases if info else []
        aliases = ", ".join(alias for alias in names if alias != game.name)
        suffix = f" (aliases: {aliases})" if aliases else ""
        click.echo(f"{game.name:<8} {game.title}{suffix}")


@main.command("parse")
@game_option
@io_options
@data_options
@click.option("--json", "output_json", is_flag=True, default=False, help="Emit JSON.")
@handle_errors
def parse_command(
    game,
    input_path,
    output_path,
    data_file,
    cache_dir,
    refresh_data,
    max_age_days,
    face,
    output_json,
) -> None:
    """Parse a deck list and resolve every card.

    Prints the normalized list ("N Name [CODE]"), or JSON with --json.
    Fails without output if any card is missing or ambiguous.
    """
    service = _service(game)
    parsed = _parse_input(service, input_path)
    resolver = _resolver(
        service, data_file, cache_dir, refresh_data, max_age_days, face
    )
    resolved = service.resolve_deck(parsed, resolver)
    render_diagnostics(resolved.diagnostics)

    if output_json:
        kept, skipped = split_proxy_items(resolved.items)
        payload = resolved.to_dict()
        payload["game"] = service.game.name
        payload["proxyItems"] = [item.to_dict() for item in kept]
        payload["skippedProxyCount"] = sum(item.count for item in skipped)
        write_json_outputs(payload=payload, out_path=output_path)
        return

    write_output_text(format_resolved_entries(resolved.items) + "\n", output_path)


@main.command("annotate")
@game_option
@io_options
@data_options
@click.option(
    "--core-status",
    is_flag=True,
    default=False,
    help="Prefix Marvel summaries with [Core] or [Not Core].",
)
@handle_errors
def annotate_command(
    game,
    input_path,
    output_path,
    data_file,
    cache_dir,
    refresh_data,
    max_age_days,
    face,
    core_status,
) -> None:
    """Add a "//? " summary line under each card line.

    Existing summaries are replaced, so running it again changes nothing.
    Nothing is written if any card cannot be resolved.
    """
    service = _service(game)
    text = read_input_text(input_path, keep_bom=True)
    source_path = None if input_path == STDIN_MARKER else Path(input_path)
    resolver = _resolver(
        service, data_file, cache_dir, refresh_data, max_age_days, face
    )

    annotated = annotate_deck_text(
        text, resolver, service.game, source_path=source_path, core_status=core_status
    )
    write_output_text(annotated, output_path)


@main.command("analyze")
@game_option
@io_options
@data_options
@click.option("--json", "output_json", is_flag=True, default=False, help="Emit JSON.")
@handle_errors
def analyze_command(
    game,
    input_path,
    output_path,
    data_file,
    cache_dir,
    refresh_data,
    max_age_days,
    face,
    output_json,
) -> None:
    """Report card totals and breakdowns by type, faction/aspect and cost."""
    service = _service(game)
    parsed = _parse_input(service, input_path)
    resolver = _resolver(
        service, data_file, cache_dir, refresh_data, max_age_days, face
    )
    resolved = service.resolve_deck(parsed, resolver)
    render_diagnostics(resolved.diagnostics)

    report = analyze_deck(resolved, service.game)
    if output_json:
        write_json_outputs(payload=report.to_dict(), out_path=output_path)
        return

    title = "" if input_path == STDIN_MARKER else Path(input_path).name
    write_output_text(format_report(report, title) + "\n", output_path)


@main.command("search")
@game_option
@data_options
@click.argument("query", nargs=-1)
@click.option(
    "--in",
    "scope",
    type=click.Choice(SEARCH_SCOPES),
    default="all",
    show_default=True,
    help="Where query terms are looked for.",
)
@click.option("--type", "card_type", help="Card type contains this text.")
@click.option("--aspect", help="Faction (Marvel) or aspect (SWU) contains this text.")
@click.option("--pack", help="Pack (Marvel) or set (SWU) code or name contains this text.")
@click.option("--cost", help='Cost: "2", "2-" (at most) or "2+" (at least).')
@click.option("--code", help="Exact card code.")
@click.option(
    "--sort",
    "sort_mode",
    type=click.Choice(SORT_MODES),
    default="cost",
    show_default=True,
    help="Result order.",
)
@click.option(
    "--limit",
    type=click.IntRange(min=0),
    default=25,
    show_default=True,
    help="Maximum results to print (0 = no limit).",
)
@click.option("--json", "output_json", is_flag=True, default=False, help="Emit JSON.")
@click.option(
    "--annotate",
    "output_annotated",
    is_flag=True,
    default=False,
    help='Emit "1x Name [CODE]" deck entries with "//? " summaries.',
)
@click.option("--output", "-o", "output_path", help="Output file (default: stdout).")
@handle_errors
def search_command(
    game,
    data_file,
    cache_dir,
    refresh_data,
    max_age_days,
    face,
    query,
    scope,
    card_type,
    aspect,
    pack,
    cost,
    code,
    sort_mode,
    limit,
    output_json,
    output_annotated,
    output_path,
) -> None:
    """Search cards by name, rules text or traits.

    Every query term must appear. Reprints are listed once.
    """
    if output_json and output_annotated:
        raise ValidationError("Use only one of --json or --annotate")

    filters = SearchFilters.from_options(
        code=code, type=card_type, aspect=aspect, pack=pack, cost=cost
    )
    service = _service(game)
    resolver = _resolver(
        service, data_file, cache_dir, refresh_data, max_age_days, face
    )
    index = resolver.index
    results = search_cards(
        index, service.game, " ".join(query), scope=scope, filters=filters, sort=sort_mode
    )
    shown = results[:limit] if limit else results

    if output_json:
        payload = [card_summary(card, service.game, index) for card in shown]
        write_json_outputs(payload=payload, out_path=output_path)
    elif output_annotated:
        text = format_search_annotations(shown, service.game, index)
        write_output_text(text + "\n" if text else "", output_path)
    else:
        lines = [service.game.format_search_line(card) for card in shown]
        write_output_text("".join(line + "\n" for line in lines), output_path)

    if len(shown) < len(results):
        click.echo(
            f"Showing {len(shown)} of {len(results)} matches (use --limit 0 for all).",
            err=True,
        )


@main.command("pack")
@game_option
@data_options
@click.argument("pack_query", metavar="[PACK]", required=False)
@click.option(
    "--list-packs",
    is_flag=True,
    default=False,
    help="List pack (Marvel) or set (SWU) codes and names.",
)
@click.option(
    "--no-codes", is_flag=True, default=False, help='Write "N Name" without [CODE].'
)
@click.option("--type", "card_type", help="Only cards whose type contains this text.")
@click.option("--json", "output_json", is_flag=True, default=False, help="Emit JSON.")
@click.option("--output", "-o", "output_path", help="Output file (default: stdout).")
@handle_errors
def pack_command(
    game,
    data_file,
    cache_dir,
    refresh_data,
    max_age_days,
    face,
    pack_query,
    list_packs,
    no_codes,
    card_type,
    output_json,
    output_path,
) -> None:
    """Write the cards of one pack or set as a deck list.

    PACK is a code ("core", "SOR") or a unique part of a pack name.
    """
    if not list_packs and not pack_query:
        raise ValidationError("Give a pack code or name, or use --list-packs.")

    service = _service(game)
    resolver = _resolver(
        service, data_file, cache_dir, refresh_data, max_age_days, face
    )
    packs = build_pack_index(resolver.index, service.game)

    if list_packs:
        if output_json:
            payload = [
                {"code": p.code, "name": p.name, "cards": len(p.cards)}
                for p in packs.values()
            ]
            write_json_outputs(payload=payload, out_path=output_path)
            return
        write_output_text(format_pack_list(packs) + "\n", output_path)
        return

    chosen = resolve_pack(pack_query, packs)
    entries = pack_entries(chosen, service.game, resolver.index, type_filter=card_type)
    logger.info("{}: {} cards", chosen.label, len(entries))

    if output_json:
        payload = {
            "code": chosen.code,
            "name": chosen.name,
            "entries": [
                {
                    "count": count,
                    "name": card.display_name,
                    "code": None if no_codes else card.code,
                }
                for count, card in entries
            ],
        }
        write_json_outputs(payload=payload, out_path=output_path)
        return

    text = format_pack_entries(entries, include_codes=not no_codes)
    write_output_text(text + "\n" if text else "", output_path)


@main.command("fetch-data")
@game_option
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False),
    help=f"Card data cache directory (default: {settings.cache_dir}).",
)
@handle_errors
def fetch_data_command(game, cache_dir) -> None:
    """Download the card database for a game into the cache."""
    service = _service(game)
    cards = service.game.load_cards(
        settings, refresh=True, cache_dir=optional_path(cache_dir)
    )
    click.echo(f"{service.game.title}: {len(cards)} cards cached")


if __name__ == "__main__":
    main()
