"""
Assemble order records from ClickUp tasks.

Field names are looked up through field_map.yaml so renamed ClickUp fields can
be followed without code changes.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv
from omegaconf import OmegaConf

from titleorder.contexts.intake.custom_fields import (
    CheckboxField,
    CustomField,
    DateField,
    DropDownField,
    LabelsField,
    NumberField,
    RelationshipField,
    TextField,
    find_field,
    parse_custom_fields,
)
from titleorder.contexts.intake.logger import _log_debug, _log_warning
from titleorder.contexts.templating.order_data_structure import (
    DocumentRecord,
    ParcelRow,
    ScopeItem,
)

load_dotenv()
DEFAULT_FIELD_MAP_PATH = Path(__file__).resolve().parent / "field_map.yaml"
FIELD_MAP_PATH = Path(os.getenv("FIELD_MAP_PATH", str(DEFAULT_FIELD_MAP_PATH)))

FIELD_KINDS = {
    "text": TextField,
    "number": NumberField,
    "date": DateField,
    "drop_down": DropDownField,
    "labels": LabelsField,
    "checkbox": CheckboxField,
    "relationship": RelationshipField,
}


def load_field_map(config_path: Path = None) -> Dict[str, Any]:
    """
    Load the field map config.

    Args:
        config_path: Optional path (defaults to FIELD_MAP_PATH env variable)

    Returns:
        {"order": {attribute: {"name", "kind"}}, "parcel": {...}}

    Raises:
        ValueError: Unknown field kind in the config
    """
    field_map = OmegaConf.to_container(OmegaConf.load(config_path or FIELD_MAP_PATH), resolve=True)

    for section in ("order", "parcel"):
        for attribute, entry in (field_map.get(section) or {}).items():
            if entry.get("kind") not in FIELD_KINDS:
                raise ValueError(
                    f"Field map entry '{section}.{attribute}' has unknown kind '{entry.get('kind')}'. "
                    f"Valid kinds: {sorted(FIELD_KINDS)}"
                )

    return field_map


def _lookup(fields: Sequence[CustomField], entry: Optional[Dict[str, str]]) -> Optional[CustomField]:
    if not entry:
        return None
    found = find_field(fields, entry["name"], FIELD_KINDS[entry["kind"]])
    if found is None:
        _log_debug(f"No {entry['kind']} field matching '{entry['name']}'")
    return found


def _scope_items(found: Optional[CustomField]) -> List[ScopeItem]:
    """
    Scope items from a labels, relationship, drop-down or text field.

    Text fields hold one item per line, "name: description".
    """
    if isinstance(found, LabelsField):
        return [ScopeItem(name=label) for label in found.value]
    if isinstance(found, RelationshipField):
        return [ScopeItem(name=task.name) for task in found.value]
    if isinstance(found, DropDownField) and found.value:
        return [ScopeItem(name=found.value)]
    if isinstance(found, TextField) and found.value:
        items = []
        for line in found.value.splitlines():
            name, _, description = line.partition(":")
            if name.strip():
                items.append(ScopeItem(name=name.strip(), description=description.strip() or None))
        return items
    return []


def _scalar(found: Optional[CustomField]) -> Any:
    if isinstance(found, DateField):
        return found.formatted()
    if isinstance(found, (LabelsField, RelationshipField)):
        _log_warning(f"Field '{found.name}' holds a list where a single value is expected")
        return None
    return found.value if found is not None else None


def build_parcel_row(subtask: Dict[str, Any], field_map: Dict[str, Any]) -> ParcelRow:
    """Build one parcel row from a parcel subtask."""
    fields = parse_custom_fields(subtask)
    parcel_map = field_map.get("parcel") or {}
    return ParcelRow(
        name=subtask.get("name"),
        parcel_id=_scalar(_lookup(fields, parcel_map.get("parcel_id"))),
        address=_scalar(_lookup(fields, parcel_map.get("address"))),
        county_st=_scalar(_lookup(fields, parcel_map.get("county_st"))),
    )


def build_order_record(
    task: Dict[str, Any],
    subtasks: Sequence[Dict[str, Any]] = (),
    field_map: Optional[Dict[str, Any]] = None,
) -> DocumentRecord:
    """
    Build an order record from a ClickUp task and its parcel subtasks.

    Missing fields are left empty; the renderer shows them as "—".

    Args:
        task: ClickUp task JSON including custom_fields
        subtasks: Full JSON of each parcel subtask
        field_map: Parsed field map (default: load_field_map())

    Returns:
        DocumentRecord ready for generate_pdf()
    """
    field_map = field_map or load_field_map()
    order_map = field_map.get("order") or {}
    fields = parse_custom_fields(task)

    return DocumentRecord(
        title=task.get("name"),
        date_ordered=_scalar(_lookup(fields, order_map.get("date_ordered"))),
        title_scope_items=_scope_items(_lookup(fields, order_map.get("title_scope_items"))),
        er_items=_scope_items(_lookup(fields, order_map.get("er_items"))),
        include_property_profile=_scalar(_lookup(fields, order_map.get("include_property_profile"))),
        delivery_instructions=_scalar(_lookup(fields, order_map.get("delivery_instructions"))),
        delivery_email=_scalar(_lookup(fields, order_map.get("delivery_email"))),
        parcels=[build_parcel_row(subtask, field_map) for subtask in subtasks],
    )
