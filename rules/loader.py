"""
Rule Loader - Reading, fetching and storing rule documents
==========================================================

This module moves rule documents between files, URLs and RuleSet
objects. JSON and YAML documents are both accepted; the format is
picked from the file suffix, or sniffed for downloaded documents.
"""

import json
import yaml
import httpx
from pathlib import Path
from typing import Any, Dict, Union

from core.exceptions import RuleLoadError
from core.logging import get_logger
from .models import RuleSet

logger = get_logger("rules.loader")

YAML_SUFFIXES = (".yaml", ".yml")


def default_rules_path() -> Path:
    """Path of the bundled DOCTOR script."""
    return Path(__file__).parent / "data" / "doctor.yaml"


def load_rules(path: Union[str, Path]) -> RuleSet:
    """
    Load a rule set from a JSON or YAML file.

    Args:
        path: File to read

    Returns:
        RuleSet in declared keyword order

    Raises:
        RuleLoadError: If the file cannot be read or parsed
        InvalidRuleSetError: If the document is malformed
    """
    path = Path(path).expanduser()

    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise RuleLoadError(f"Failed to read rules file: {e}", {"path": str(path)})

    if path.suffix.lower() in YAML_SUFFIXES:
        data = _parse_yaml(content, str(path))
    else:
        data = _parse_json(content, str(path))

    ruleset = RuleSet.from_dict(data)
    logger.info(f"Loaded {len(ruleset.keywords)} keywords from {path}")
    return ruleset


def fetch_rules(url: str, timeout: float = 10.0) -> RuleSet:
    """
    Download a rule set over HTTP.

    Args:
        url: Location of a JSON or YAML rule document
        timeout: Request timeout in seconds

    Returns:
        RuleSet in declared keyword order

    Raises:
        RuleLoadError: If the request fails or the body cannot be parsed
        InvalidRuleSetError: If the document is malformed
    """
    try:
        with httpx.Client(timeout=timeout, follow_redirects=True) as client:
            response = client.get(url)
            response.raise_for_status()
    except httpx.HTTPError as e:
        raise RuleLoadError(f"Failed to fetch rules: {e}", {"url": url})

    body = response.text
    if body.lstrip().startswith(("{", "[")):
        data = _parse_json(body, url)
    else:
        data = _parse_yaml(body, url)

    ruleset = RuleSet.from_dict(data)
    logger.info(f"Fetched {len(ruleset.keywords)} keywords from {url}")
    return ruleset


def save_rules(ruleset: RuleSet, path: Union[str, Path]) -> None:
    """
    Write a rule set as a JSON or YAML document.

    Args:
        ruleset: Rule set to store
        path: Destination; a .yaml/.yml suffix selects YAML

    Raises:
        RuleLoadError: If the file cannot be written
    """
    path = Path(path).expanduser()
    data = ruleset.to_dict()

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
            else:
                json.dump(data, f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise RuleLoadError(f"Failed to store rules: {e}", {"path": str(path)})

    logger.info(f"Stored rule set to {path}")


def _parse_json(content: str, source: str) -> Dict[str, Any]:
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise RuleLoadError(f"Invalid JSON rule document: {e}", {"source": source})


def _parse_yaml(content: str, source: str) -> Dict[str, Any]:
    try:
        return yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise RuleLoadError(f"Invalid YAML rule document: {e}", {"source": source})
