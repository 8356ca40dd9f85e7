"""CLI entry point: dagda campaign journal.

Usage:
  dagda new "The Fog Road" -c Mael -m mortal -t instinct
  dagda list
  dagda show 3f2a
  dagda hp 3f2a --damage 4
  dagda save 3f2a 1
  dagda fight 3f2a --enemy "Bog wight:8:6"
  dagda --help
"""

import functools
import logging
import sys
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

import click
from rich.markup import escape
from rich.panel import Panel

from cli.theme import (
    app_header,
    command_panel,
    get_console,
    hp_text,
    party_summary_panel,
    party_table,
    save_slots_table,
    success_panel,
    timeline_table,
)
from config.exceptions import DagdaError
from config.logging_config import setup_logging
from config.settings import Settings
from models.combat import Enemy
from models.enums import CombatOutcome, GameMode, Talent
from models.party import Item, Weapon
from usecases.container import Container, build_container

console = get_console()


def _init_logging(settings: Settings, verbose: bool):
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    setup_logging(level=level, log_dir=settings.log_dir, console_enabled=verbose)


def handle_errors(func):
    """Render domain errors as a red line and exit with status 1."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DagdaError as e:
            console.print(f"[error]{escape(str(e))}[/]")
            sys.exit(1)
    return wrapper


def _resolve_party(container: Container, ref: str):
    """Find a party by full id or by a unique id prefix."""
    matches = [p for p in container.list_parties.execute() if p.id == ref or p.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if not matches:
        console.print(f"[error]No party matches '{ref}'[/]")
    else:
        console.print(f"[error]'{ref}' is ambiguous ({len(matches)} parties)[/]")
    sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, verbose):
    """dagda: journal for solo gamebook campaigns.

    \b
    Parties are referenced by id; any unique prefix of the id works.
    """
    settings = Settings()
    _init_logging(settings, verbose)
    ctx.obj = build_container(settings)


# ---------------------------------------------------------------------------
# Party lifecycle
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("name")
@click.option("--character", "-c", "character_name", required=True, help="Character name")
@click.option("--mode", "-m", default="narrative",
              type=click.Choice([m.value.lower() for m in GameMode]), help="Game mode")
@click.option("--talent", "-t", default="instinct",
              type=click.Choice([t.value.lower() for t in Talent]), help="Starting talent")
@click.pass_obj
@handle_errors
def new(container: Container, name, character_name, mode, talent):
    """Create a new party and roll its character."""
    console.print(app_header())
    console.print(command_panel("New party", {
        "Name": name,
        "Character": character_name,
        "Mode": mode.upper(),
        "Talent": talent.upper(),
    }))
    party = container.create_party.execute(name, GameMode(mode.upper()), Talent(talent.upper()), character_name)
    char = party.character
    console.print(success_panel(
        "Party created",
        f"  [stat.label]ID:[/] {party.id}\n"
        f"  [stat.label]HP:[/] {hp_text(char.hp_current, char.hp_max)}  "
        f"[muted]|[/]  [stat.label]Luck:[/] [stat.value]{char.luck}[/]  "
        f"[muted]|[/]  [stat.label]Dexterity:[/] [stat.value]{char.dexterity}[/]",
    ))


@cli.command(name="list")
@click.pass_obj
@handle_errors
def list_parties(container: Container):
    """List parties, most recently played first."""
    parties = container.list_parties.execute()
    if not parties:
        console.print("[warning]No parties yet. Use [info]dagda new[/] to start one.[/]")
        return
    console.print(party_table(parties))


@cli.command()
@click.argument("party_ref")
@click.option("--events", "-e", default=15, show_default=True, help="Timeline entries to show")
@click.pass_obj
@handle_errors
def show(container: Container, party_ref, events):
    """Show a party's sheet, saves, notes and recent timeline."""
    party = _resolve_party(container, party_ref)
    overview = container.party_overview.execute(party.id)

    console.print(app_header())
    console.print(party_summary_panel(overview.party, len(overview.save_slots), len(overview.notes)))
    console.print(save_slots_table(overview.save_slots))
    if overview.notes:
        console.print("[bold]Notes[/]")
        for note in overview.notes[:5]:
            console.print(f"  [muted]{note.created_at}[/] {note.content}")
    console.print(timeline_table(overview.timeline, limit=events))


@cli.command()
@click.argument("party_ref")
@click.option("--damage", "-d", type=click.IntRange(min=0), default=0, help="HP lost")
@click.option("--heal", "-h", "heal", type=click.IntRange(min=0), default=0, help="HP regained")
@click.pass_obj
@handle_errors
def hp(container: Container, party_ref, damage, heal):
    """Apply damage or healing."""
    delta = heal - damage
    if delta == 0:
        console.print("[warning]Nothing to apply: pass --damage or --heal[/]")
        return
    party = _resolve_party(container, party_ref)
    result = container.update_hp.execute(party.id, delta)
    hp_max = party.character.hp_max
    console.print(f"HP {result.hp_before} -> {hp_text(result.hp_after, hp_max)}")
    if result.is_mortal_death:
        console.print(Panel("[hp.zero]Your character has died. The adventure is over.[/]",
                            border_style="red", padding=(0, 2)))
    elif result.was_reset:
        console.print("[warning]Death: back to chapter 1 with full HP and an empty pack.[/]")
    elif result.is_dead:
        console.print("[warning]HP at 0.[/]")


@cli.command()
@click.argument("party_ref")
@click.argument("number", type=int)
@click.pass_obj
@handle_errors
def chapter(container: Container, party_ref, number):
    """Move the party to another chapter."""
    party = _resolve_party(container, party_ref)
    updated = container.update_chapter.execute(party.id, number)
    console.print(f"[success]Chapter {updated.current_chapter}[/]")


@cli.command()
@click.argument("party_ref")
@click.argument("cost", type=int)
@click.pass_obj
@handle_errors
def luck(container: Container, party_ref, cost):
    """Spend luck points."""
    party = _resolve_party(container, party_ref)
    updated = container.apply_luck.execute(party.id, cost)
    console.print(f"[success]Luck left: {updated.character.luck}[/]")


@cli.command()
@click.argument("party_ref")
@click.argument("name")
@click.option("--bonus", "-b", default=0, help="Damage bonus")
@click.option("--equip/--no-equip", default=True, help="Equip the new weapon")
@click.pass_obj
@handle_errors
def weapon(container: Container, party_ref, name, bonus, equip):
    """Add a weapon to the inventory."""
    party = _resolve_party(container, party_ref)
    new_weapon = Weapon(id=str(uuid.uuid4()), name=name, bonus=bonus)
    patch = {"weapons": [*party.character.inventory.weapons, new_weapon]}
    if equip:
        patch["equipped_weapon_id"] = new_weapon.id
    container.update_inventory.execute(party.id, patch, f"Weapon found: {name}")
    console.print(f"[success]{name} (+{bonus}) added[/]")


def _find_by_name(entries, name: str, kind: str):
    """Case-insensitive lookup of a weapon or item by name."""
    match = next((e for e in entries if e.name.casefold() == name.casefold()), None)
    if match is None:
        console.print(f"[error]No {kind} named '{name}'[/]")
        sys.exit(1)
    return match


@cli.command()
@click.argument("party_ref")
@click.argument("name")
@click.option("--quantity", "-q", type=click.IntRange(min=1), default=1, show_default=True)
@click.pass_obj
@handle_errors
def item(container: Container, party_ref, name, quantity):
    """Add an item; an item already carried is stacked."""
    party = _resolve_party(container, party_ref)
    items = list(party.character.inventory.items)
    existing = next((i for i in items if i.name.casefold() == name.casefold()), None)
    if existing is None:
        items.append(Item(id=str(uuid.uuid4()), name=name, quantity=quantity))
        total = quantity
    else:
        total = existing.quantity + quantity
        items = [replace(i, quantity=total) if i.id == existing.id else i for i in items]
    container.update_inventory.execute(party.id, {"items": items}, f"Item found: {name} x{quantity}")
    console.print(f"[success]{name}: {total}[/]")


@cli.command()
@click.argument("party_ref")
@click.argument("name")
@click.option("--quantity", "-q", type=click.IntRange(min=1), default=None,
              help="How many to drop (default: the whole stack)")
@click.option("--weapon", "-w", "is_weapon", is_flag=True, help="Drop a weapon instead of an item")
@click.pass_obj
@handle_errors
def drop(container: Container, party_ref, name, quantity, is_weapon):
    """Remove an item or a weapon from the inventory."""
    party = _resolve_party(container, party_ref)
    inventory = party.character.inventory
    if is_weapon:
        target = _find_by_name(inventory.weapons, name, "weapon")
        patch = {"weapons": [w for w in inventory.weapons if w.id != target.id]}
        left = 0
    else:
        target = _find_by_name(inventory.items, name, "item")
        left = 0 if quantity is None else max(target.quantity - quantity, 0)
        patch = {"items": [
            replace(i, quantity=left) if i.id == target.id else i
            for i in inventory.items
            if i.id != target.id or left > 0
        ]}
    container.update_inventory.execute(party.id, patch, f"Dropped: {target.name}")
    console.print(f"[success]{target.name} dropped[/]" if left == 0 else f"[success]{target.name}: {left} left[/]")


@cli.command()
@click.argument("party_ref")
@click.argument("name")
@click.pass_obj
@handle_errors
def equip(container: Container, party_ref, name):
    """Equip a carried weapon."""
    party = _resolve_party(container, party_ref)
    target = _find_by_name(party.character.inventory.weapons, name, "weapon")
    container.update_inventory.execute(party.id, {"equipped_weapon_id": target.id}, f"Equipped: {target.name}")
    console.print(f"[success]{target.name} equipped[/]")


@cli.command()
@click.argument("party_ref")
@click.pass_obj
@handle_errors
def unequip(container: Container, party_ref):
    """Clear the equipped choice; combat then uses the first weapon carried."""
    party = _resolve_party(container, party_ref)
    container.update_inventory.execute(party.id, {"equipped_weapon_id": None}, "Weapon unequipped")
    console.print("[success]No weapon equipped: the first weapon carried is used[/]")


@cli.command()
@click.argument("party_ref")
@click.argument("amount", type=int)
@click.pass_obj
@handle_errors
def boulons(container: Container, party_ref, amount):
    """Set the boulon count."""
    party = _resolve_party(container, party_ref)
    container.update_inventory.execute(party.id, {"currency": amount}, f"Boulons: {amount}")
    console.print(f"[success]Boulons: {amount}[/]")


@cli.command()
@click.argument("party_ref")
@click.pass_obj
@handle_errors
def finish(container: Container, party_ref):
    """Mark the party as finished."""
    party = _resolve_party(container, party_ref)
    container.finish_party.execute(party.id)
    console.print(f"[success]{party.name} finished[/]")


@cli.command()
@click.argument("party_ref")
@click.option("--force", "-f", is_flag=True, help="Skip the confirmation prompt")
@click.pass_obj
@handle_errors
def delete(container: Container, party_ref, force):
    """Delete a party with its notes, saves and timeline."""
    party = _resolve_party(container, party_ref)
    console.print(Panel(
        f"  [stat.label]Party:[/] [bold]{party.name}[/] [muted]({party.id})[/]\n"
        f"\n"
        f"  [error]Notes, saves and the whole timeline go with it.[/]",
        title="[error]Delete party[/]",
        border_style="red",
        padding=(0, 2),
    ))
    if not force and not click.confirm("Delete? This cannot be undone", default=False):
        console.print("[warning]Cancelled[/]")
        return
    container.delete_party.execute(party.id)
    console.print(f"[success]{party.name} deleted[/]")


# ---------------------------------------------------------------------------
# Journal
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("party_ref")
@click.argument("content")
@click.pass_obj
@handle_errors
def note(container: Container, party_ref, content):
    """Write a note in the party journal."""
    party = _resolve_party(container, party_ref)
    container.add_note.execute(party.id, content)
    console.print("[success]Note added[/]")


@cli.command()
@click.argument("party_ref")
@click.argument("label")
@click.pass_obj
@handle_errors
def action(container: Container, party_ref, label):
    """Record a free-form action on the timeline."""
    party = _resolve_party(container, party_ref)
    event = container.add_custom_action.execute(party.id, label)
    console.print(f"[success]{event.label}[/]")


# ---------------------------------------------------------------------------
# Saves
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("party_ref")
@click.argument("slot", type=click.IntRange(1, 3))
@click.pass_obj
@handle_errors
def save(container: Container, party_ref, slot):
    """Save the party into slot 1, 2 or 3."""
    party = _resolve_party(container, party_ref)
    container.create_save.execute(party.id, slot)
    console.print(f"[success]Saved in slot {slot}[/]")


@cli.command()
@click.argument("party_ref")
@click.argument("slot", type=click.IntRange(1, 3))
@click.pass_obj
@handle_errors
def restore(container: Container, party_ref, slot):
    """Restore the party from a save slot."""
    party = _resolve_party(container, party_ref)
    slots = container.party_overview.execute(party.id).save_slots
    target = next((s for s in slots if s.slot == slot), None)
    if target is None:
        console.print(f"[error]Slot {slot} is empty[/]")
        sys.exit(1)
    restored = container.restore_save.execute(party.id, target.id)
    console.print(f"[success]Slot {slot} restored: chapter {restored.current_chapter}, "
                  f"HP {restored.character.hp_current}/{restored.character.hp_max}[/]")


# ---------------------------------------------------------------------------
# Export / import
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("party_ref")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Target JSON file (default: export dir)")
@click.option("--summary", "-s", is_flag=True, help="Also print the text summary")
@click.pass_obj
@handle_errors
def export(container: Container, party_ref, output, summary):
    """Export a party to a portable JSON file."""
    party = _resolve_party(container, party_ref)
    result = container.export_party.execute(party.id)
    if output is None:
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
        output = Path(container.settings.export_dir) / f"dagda-{party.id[:8]}-{stamp}.json"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.json, encoding="utf-8")
    if summary:
        console.print(Panel(result.summary, border_style="dim", padding=(0, 2)))
    console.print(f"[success]Exported to {output}[/]")


@cli.command(name="import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_obj
@handle_errors
def import_party(container: Container, path):
    """Import a party from an export file, as a new party."""
    party = container.import_party.execute(path.read_bytes())
    console.print(success_panel("Party imported", f"  [bold]{party.name}[/] [muted]({party.id})[/]"))


@cli.command()
@click.argument("target", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
@handle_errors
def backup(container: Container, target):
    """Copy the whole database file to TARGET."""
    path = container.db.backup_database(target)
    console.print(f"[success]Database copied to {path}[/]")


# ---------------------------------------------------------------------------
# Combat
# ---------------------------------------------------------------------------

def _parse_enemy(index: int, raw: str) -> Enemy:
    """``name[:hp[:dexterity[:bonus]]]``"""
    parts = raw.split(":")
    try:
        numbers = [int(p) for p in parts[1:4]]
    except ValueError:
        raise click.BadParameter(f"'{raw}': expected name[:hp[:dexterity[:bonus]]]", param_hint="--enemy") from None
    hp_max = numbers[0] if len(numbers) > 0 else 10
    return Enemy(
        id=f"enemy-{index + 1}",
        name=parts[0] or f"Enemy {index + 1}",
        hp_max=hp_max,
        hp_current=hp_max,
        dexterity=numbers[1] if len(numbers) > 1 else 6,
        attack_bonus=numbers[2] if len(numbers) > 2 else 0,
    )


@cli.command()
@click.argument("party_ref")
@click.option("--enemy", "-e", "enemy_args", multiple=True, default=["Enemy"],
              help="Enemy as name[:hp[:dexterity[:bonus]]]; repeat for a group")
@click.option("--max-turns", default=50, show_default=True, help="Stop after this many turns")
@click.pass_obj
@handle_errors
def fight(container: Container, party_ref, enemy_args, max_turns):
    """Fight it out, turn by turn, with automatic rolls."""
    party = _resolve_party(container, party_ref)
    enemies = [_parse_enemy(i, raw) for i, raw in enumerate(enemy_args)]
    session = container.combat(party.id, enemies)
    session.start()
    console.print(app_header(f"Combat: {', '.join(e.name for e in enemies)}"))

    while session.outcome == CombatOutcome.ONGOING and session.state.turn <= max_turns:
        target = next(e for e in session.enemies if e.hp_current > 0)
        console.print(session.player_attack(target.id).label)
        for enemy in session.enemies:
            if session.outcome != CombatOutcome.ONGOING:
                break
            if enemy.hp_current > 0:
                console.print(f"[muted]{session.enemy_attack(enemy.id).label}[/]")

    if session.outcome == CombatOutcome.VICTORY:
        console.print("[success]Victory![/]")
    elif session.outcome == CombatOutcome.DEFEAT:
        console.print("[warning]Defeat: HP at 0.[/]")
    elif session.outcome == CombatOutcome.MORTAL_DEATH:
        console.print("[hp.zero]Your character has died. The adventure is over.[/]")
    else:
        console.print(f"[warning]Fight stopped after {max_turns} turns[/]")


if __name__ == "__main__":
    cli()
