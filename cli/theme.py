"""Unified Rich theme and reusable UI helper functions for the CLI."""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.theme import Theme

from models.enums import TALENT_LABELS, PartyStatus
from rules.character import MAX_SAVE_SLOTS, equipped_weapon

DAGDA_THEME = Theme({
    "app.title": "bold",
    "success": "green",
    "warning": "yellow",
    "error": "red",
    "info": "blue",
    "muted": "dim",
    "accent": "cyan",
    "stat.label": "dim",
    "stat.value": "bold",
    "chapter.num": "blue",
    "character.name": "bold cyan",
    "hp.ok": "green",
    "hp.low": "yellow",
    "hp.zero": "bold red",
})

STATUS_STYLES = {
    PartyStatus.ACTIVE: "green",
    PartyStatus.FINISHED: "cyan",
    PartyStatus.DEAD: "red",
}


def get_console() -> Console:
    """Return a Console instance with the dagda theme applied."""
    return Console(theme=DAGDA_THEME)


def app_header(title: str = "dagda") -> Rule:
    """Return a Rule element for the application header banner."""
    return Rule(title=f"[bold]{title}[/]", style="dim")


def command_panel(title: str, fields: dict[str, str]) -> Panel:
    """Return a Panel displaying command parameters.

    Args:
        title: Panel title (e.g. "New party").
        fields: Ordered dict of label -> value pairs.
    """
    lines = []
    for label, value in fields.items():
        lines.append(f"  [stat.label]{label}:[/] [stat.value]{value}[/]")
    body = "\n".join(lines)
    return Panel(body, title=f"[bold]{title}[/]", box=box.ROUNDED, border_style="dim", padding=(0, 2))


def success_panel(title: str, body: str) -> Panel:
    """Return a green-bordered Panel for success results."""
    return Panel(body, title=f"[success]{title}[/]", box=box.ROUNDED, border_style="green", padding=(0, 2))


def hp_text(hp_current: int, hp_max: int) -> str:
    if hp_current <= 0:
        style = "hp.zero"
    elif hp_current * 3 <= hp_max:
        style = "hp.low"
    else:
        style = "hp.ok"
    return f"[{style}]{hp_current}[/] / {hp_max}"


def status_text(status: PartyStatus) -> str:
    return f"[{STATUS_STYLES.get(status, 'white')}]{status.value}[/]"


def party_summary_panel(party, save_count: int, note_count: int) -> Panel:
    """Return a Panel with the party's character sheet.

    Args:
        party: Party dataclass.
        save_count: Number of occupied save slots.
        note_count: Number of notes in the journal.
    """
    char = party.character
    weapon = equipped_weapon(char.inventory)
    weapon_label = f"{weapon.name} (+{weapon.bonus})" if weapon else "bare hands"
    body = (
        f"  [stat.label]Mode:[/] {party.mode.value}  "
        f"[muted]|[/]  [stat.label]Status:[/] {status_text(party.status)}  "
        f"[muted]|[/]  [stat.label]Chapter:[/] [chapter.num]{party.current_chapter}[/]\n"
        f"  [character.name]{char.name}[/] [muted]({TALENT_LABELS.get(char.talent, char.talent.value)})[/]\n"
        f"  [stat.label]HP:[/] {hp_text(char.hp_current, char.hp_max)}  "
        f"[muted]|[/]  [stat.label]Luck:[/] [stat.value]{char.luck}[/]  "
        f"[muted]|[/]  [stat.label]Dexterity:[/] [stat.value]{char.dexterity}[/]\n"
        f"  [stat.label]Weapon:[/] {weapon_label}  "
        f"[muted]|[/]  [stat.label]Boulons:[/] [stat.value]{char.inventory.currency.boulons}[/]\n"
        f"  [stat.label]Saves:[/] [stat.value]{save_count}[/] / {MAX_SAVE_SLOTS}  "
        f"[muted]|[/]  [stat.label]Notes:[/] [stat.value]{note_count}[/]"
    )
    return Panel(
        body,
        title=f"[bold]{party.name}[/] [muted]({party.id[:8]})[/]",
        box=box.ROUNDED,
        border_style="dim",
        padding=(0, 2),
    )


def party_table(parties: list) -> Table:
    """Build a Rich Table listing parties, most recently played first."""
    table = Table(title="Parties", show_lines=True, border_style="dim")
    table.add_column("ID", style="muted")
    table.add_column("Name", style="bold")
    table.add_column("Mode")
    table.add_column("Status")
    table.add_column("Chapter", justify="right", style="chapter.num")
    table.add_column("HP", justify="right")
    table.add_column("Updated", style="muted")

    for p in parties:
        table.add_row(
            p.id[:8],
            p.name,
            p.mode.value,
            status_text(p.status),
            str(p.current_chapter),
            hp_text(p.character.hp_current, p.character.hp_max),
            p.updated_at,
        )
    return table


def save_slots_table(slots: list) -> Table:
    """Build a Rich Table of the three save slots, empty ones included."""
    by_number = {s.slot: s for s in slots}
    table = Table(box=box.ROUNDED, border_style="dim", show_header=True, padding=(0, 1))
    table.add_column("Slot", justify="right")
    table.add_column("Chapter", justify="right", style="chapter.num")
    table.add_column("HP", justify="right")
    table.add_column("Saved at", style="muted")

    for number in range(1, MAX_SAVE_SLOTS + 1):
        slot = by_number.get(number)
        if slot is None:
            table.add_row(str(number), "[muted]-[/]", "[muted]-[/]", "[muted]empty[/]")
            continue
        party = slot.snapshot.party
        table.add_row(
            str(number),
            str(party.current_chapter),
            hp_text(party.character.hp_current, party.character.hp_max),
            slot.created_at,
        )
    return table


def timeline_table(events: list, limit: int = 15) -> Table:
    """Build a Rich Table of the most recent timeline events.

    Args:
        events: TimelineEvent list, most recent first.
        limit: Maximum rows shown.
    """
    table = Table(box=box.SIMPLE, show_header=True, padding=(0, 1))
    table.add_column("When", style="muted")
    table.add_column("Event", style="accent")
    table.add_column("Label")

    for e in events[:limit]:
        table.add_row(e.created_at, e.type.value, e.label)

    if len(events) > limit:
        table.add_row("", f"[muted]+{len(events) - limit} more[/]", "")
    return table
