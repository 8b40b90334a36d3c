"""
mockdispatch Configuration

Dispatch settings and YAML mapping files.

Example mapping file:

    log_level: debug
    mappings:
      - url: http://a.ru
        status: 201
      - pattern: ^https://api\\.example\\.com/users
        status: 200
        headers:
          Content-Type: application/json
        body: '{"users": []}'
      - pattern: ^file://
        passthrough: true
"""

from __future__ import annotations  # Enable forward references for type hints

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from dataclasses import dataclass, fields
import yaml

from .matcher import ExactUrl, UrlPattern
from .resolver import PASSTHROUGH
from .responses import respond_like

if TYPE_CHECKING:
    from .table import MappingScope


@dataclass
class DispatchConfig:
    """Configuration for dispatch behavior."""

    # Fill in client default headers before comparing exact requests
    prepare_default_headers: bool = True

    # Logging
    log_level: str = "warning"
    log_unmatched: bool = False  # Log unmatched requests at WARNING instead of DEBUG

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DispatchConfig':
        """Create config from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_yaml(cls, yaml_path: str) -> 'DispatchConfig':
        """Load config from YAML file."""
        with open(yaml_path, 'r') as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)


def _canned_response(status: int, headers: Optional[Dict[str, str]], body: Any):
    """Computed response that builds a response for whichever client asked."""

    def respond(request: Any):
        return respond_like(request, status=status, content=body, headers=headers)

    return respond


def load_mappings(yaml_path: str, scope: MappingScope) -> List[int]:
    """
    Register every mapping of a YAML mapping file in ``scope``.

    Args:
        yaml_path: Path to mapping file
        scope: Registry or client to register the mappings in

    Returns:
        Indices of the registered mappings, in file order

    Raises:
        ValueError: If an entry has no matcher or no response
    """
    with open(Path(yaml_path), 'r') as f:
        data = yaml.safe_load(f) or {}

    indices = []
    for position, item in enumerate(data.get('mappings', [])):
        if 'url' in item:
            matcher = ExactUrl(str(item['url']))
        elif 'pattern' in item:
            matcher = UrlPattern(re.compile(str(item['pattern'])))
        else:
            raise ValueError(f"Mapping #{position} in {yaml_path} needs 'url' or 'pattern'")

        if item.get('passthrough'):
            indices.append(scope.map(matcher, PASSTHROUGH))
        elif 'status' in item:
            response = _canned_response(int(item['status']), item.get('headers'), item.get('body', ''))
            indices.append(scope.map(matcher, response))
        else:
            raise ValueError(f"Mapping #{position} in {yaml_path} needs 'status' or 'passthrough'")

    return indices
