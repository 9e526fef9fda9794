"""
YAML data loader with schema validation.

Loads the aquarium definition, themes, and asset packs from YAML files and
validates them against JSON schemas.
"""

import yaml
import json
from pathlib import Path
from typing import List, Optional
import jsonschema

from .assets import AssetTable, default_asset_table, make_art, measure_art
from .data_types import FishArt, Palette, SimulationConfig, Theme


class DataLoadError(Exception):
    """Raised when data loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    file_path = Path(file_path)
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}")

    if not isinstance(data, dict):
        raise DataLoadError(f"Expected a mapping at the top of {file_path}")
    return data


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        # Schema validation optional (schema may be absent in a trimmed pack)
        return

    try:
        with open(schema_path, 'r') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise DataLoadError(f"Validation error in {data_path}: {e.message}")
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}")


def load_asset_pack(file_path: Path, schema_dir: Optional[Path] = None) -> List[FishArt]:
    """Load extra art blocks from an asset pack YAML"""
    data = load_yaml(file_path)

    # Validate if schema available
    if schema_dir:
        schema_path = Path(schema_dir) / "asset_pack.schema.json"
        validate_against_schema(data, schema_path, file_path)

    arts = []
    for entry in data.get('assets', []):
        text = entry.get('art', '')
        if not text.strip():
            print(f"[WARN] Asset '{entry.get('name', '?')}' in {file_path} has no art, skipping")
            continue

        art = make_art(text, entry.get('name', ''), entry.get('category', 'fish'))
        if 'width' in entry or 'height' in entry:
            # Declared dimensions are authoritative for footprint math
            measured_w, measured_h = measure_art(text)
            art = FishArt(
                art=art.art,
                width=int(entry.get('width', measured_w)),
                height=int(entry.get('height', measured_h)),
                name=art.name,
                category=art.category,
            )
        arts.append(art)

    return arts


def load_theme(file_path: Path, schema_dir: Optional[Path] = None) -> Theme:
    """Load display theme from YAML"""
    data = load_yaml(file_path)

    # Validate if schema available
    if schema_dir:
        schema_path = Path(schema_dir) / "theme.schema.json"
        validate_against_schema(data, schema_path, file_path)

    palette = None
    if data.get('palette') is not None:
        palette = Palette(**data['palette'])

    return Theme(
        text_color=data.get('text_color', Theme.text_color),
        background=data.get('background'),
        wrap=data.get('wrap', False),
        enable_color=data.get('enable_color', False),
        palette=palette
    )


def load_aquarium(file_path: Path, schema_dir: Optional[Path] = None) -> dict:
    """
    Load aquarium definition from YAML.

    Returns dict with keys: aquarium_id, name, size, dt, config,
    theme_file, asset_packs (file references relative to the YAML's directory)
    """
    data = load_yaml(file_path)

    # Validate if schema available
    if schema_dir:
        schema_path = Path(schema_dir) / "aquarium.schema.json"
        validate_against_schema(data, schema_path, file_path)

    grid = data['grid']
    return {
        'aquarium_id': data['aquarium_id'],
        'name': data.get('name', data['aquarium_id']),
        'size': (int(grid['width']), int(grid['height'])),
        'dt': float(data.get('tick_delta', 1.0)),
        'config': SimulationConfig(**data.get('simulation', {})),
        'theme_file': data.get('theme'),
        'asset_packs': list(data.get('asset_packs', [])),
        'description': data.get('description')
    }


def load_all_data(data_root: Path, schema_dir: Optional[Path] = None) -> dict:
    """Load all aquarium data from data directory

    Returns dict with keys: aquarium, size, dt, config, theme, assets
    """
    data_root = Path(data_root)

    # Load aquarium definition
    aquarium = load_aquarium(data_root / "aquarium.yaml", schema_dir)

    # Load theme (referenced in aquarium definition)
    theme = Theme()
    if aquarium['theme_file']:
        theme = load_theme(data_root / aquarium['theme_file'], schema_dir)

    # Load asset packs on top of the built-in catalog
    extra: List[FishArt] = []
    for pack in aquarium['asset_packs']:
        arts = load_asset_pack(data_root / pack, schema_dir)
        print(f"  {pack}: loaded {len(arts)} assets")
        extra.extend(arts)

    assets: AssetTable = default_asset_table().extended(extra)

    return {
        'aquarium': aquarium,
        'size': aquarium['size'],
        'dt': aquarium['dt'],
        'config': aquarium['config'],
        'theme': theme,
        'assets': assets
    }
