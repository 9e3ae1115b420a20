import logging
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from node_scheduler.rules.models import Rules

logger = logging.getLogger(__name__)

# First ```yaml block of a Markdown document.
_YAML_FENCE = re.compile(r"^\s*```yaml[^\n]*\n(.*?)^\s*```", re.MULTILINE | re.DOTALL)


def extract_yaml(content: str) -> str:
    """Return the first ```yaml fenced block, or the whole text if there is none."""
    match = _YAML_FENCE.search(content)
    return match.group(1) if match else content


def parse_rules(content: str) -> Rules:
    """
    Parse scheduler rules from YAML text or a Markdown document embedding it.
    Raises ValueError if the YAML or the schema is invalid.
    """
    try:
        data = yaml.safe_load(extract_yaml(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise ValueError("Rules file must contain a mapping at the top level")

    try:
        return Rules.model_validate(data or {})
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e


def load_rules(path: Path | str) -> Rules:
    """
    Load and validate a rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if schema invalid.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    rules = parse_rules(path.read_text())
    logger.debug("Loaded scheduler rules for %d node types from %s", len(rules.node_types), path)
    return rules
