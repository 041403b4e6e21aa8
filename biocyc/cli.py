"""
BioCyc CLI - inspect BioCyc objects from the command line

    biocyc show ECOLI:VALSYN-PWY --detail full
    biocyc refs ECOLI:VALSYN-PWY reaction_list
    biocyc atom-mappings ECOLI:FUMHYDR-RXN
    biocyc kinds
"""
import click
from lxml import etree
from rich.console import Console
from rich.table import Table

from biocyc import __version__, models  # noqa: F401  (registers record kinds)
from biocyc.errors import BioCycError, InvalidIdentifier
from biocyc.fields import Reference
from biocyc.identity import Identity
from biocyc.records import registry
from biocyc.settings import get_settings
from biocyc.utils import get_logger, setup_logging
from biocyc.web_services import download_atom_mappings

console = Console()
logger = get_logger(__name__)

DETAIL_CHOICES = click.Choice(["none", "low", "full"])


def _resolve(object_id, detail):
    try:
        identity = Identity.parse(object_id)
        with console.status(f"[bold green]Fetching {identity}..."):
            return identity.resolve(detail)
    except (BioCycError, ConnectionError, etree.XMLSyntaxError) as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        raise SystemExit(1)


def _format(value):
    if isinstance(value, list):
        return "\n".join(_format(item) for item in value) if value else "[]"
    if isinstance(value, dict):
        return ", ".join(f"{k}={_format(v)}" for k, v in value.items() if v not in (None, [], ""))
    return "" if value is None else str(value)


# ═══════════════════════════════════════════════════════════════════
# MAIN CLI GROUP
# ═══════════════════════════════════════════════════════════════════

@click.group()
@click.version_option(version=__version__)
@click.option("--log-level", default=None, help="Logging level (default from settings)")
def main(log_level):
    """
    BioCyc - typed access to BioCyc Pathway Tools objects
    """
    settings = get_settings()
    setup_logging(log_level or settings.log_level, settings.log_file)


@main.command()
@click.argument("object_id")
@click.option("--detail", "-d", type=DETAIL_CHOICES, default=None, help="Detail level to request")
def show(object_id, detail):
    """Fetch an object and print its fields"""
    record = _resolve(object_id, detail or get_settings().default_detail)

    table = Table(title=f"{type(record).__name__} {record.identity}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="magenta")

    for name, value in record.to_dict().items():
        if value in (None, [], ""):
            continue
        table.add_row(name, _format(value))

    console.print(table)


@main.command()
@click.argument("object_id")
@click.argument("field")
def refs(object_id, field):
    """List the identities held by a relationship field"""
    record = _resolve(object_id, get_settings().default_detail)

    references = {f.name: f for f in record.fields() if isinstance(f, Reference)}
    if field not in references:
        console.print(f"\n[red]✗ {type(record).__name__} has no relationship field {field!r}[/red]")
        console.print(f"Available: {', '.join(sorted(references)) or '(none)'}")
        raise SystemExit(2)

    identities = references[field].identities(record)
    if not isinstance(identities, list):
        identities = [] if identities is None else [identities]

    for identity in identities:
        console.print(f"  • {identity}")
    console.print(f"\n[green]✓ {len(identities)} reference(s)[/green]")


@main.command("atom-mappings")
@click.argument("object_id")
def atom_mappings(object_id):
    """Download and decode the atom mappings of a reaction"""
    try:
        identity = Identity.parse(object_id)
        with console.status(f"[bold green]Downloading atom mappings for {identity}..."):
            mappings = download_atom_mappings(identity.unescaped_realm, identity.unescaped_frame)
    except (InvalidIdentifier, ConnectionError, ValueError) as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        raise SystemExit(1)

    for n, mapping in enumerate(mappings, start=1):
        table = Table(title=f"Atom mapping {n}")
        table.add_column("From", style="cyan")
        table.add_column("To", style="magenta")
        for source, target in mapping.items():
            table.add_row(source, target)
        console.print(table)

    console.print(f"\n[green]✓ {len(mappings)} mapping(s)[/green]")


@main.command()
def kinds():
    """List registered record kinds"""
    for name in registry.names():
        console.print(f"  • {name}")


if __name__ == "__main__":
    main()
