import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from safeinput.components.allowlist import AllowlistConfigError
from safeinput.rules.models import Rules

logger = logging.getLogger(__name__)

DEFAULT_RULES_PATH = Path("rules.yaml")


def _strip_code_fences(content: str) -> str:
    """Return the first ```yaml block if present, else the whole content."""
    yaml_lines = []
    in_block = False
    found_block = False

    for line in content.splitlines():
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            break
        if in_block:
            yaml_lines.append(line)

    if found_block:
        return "\n".join(yaml_lines)
    return content


def load_rules(path: Path = DEFAULT_RULES_PATH) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if the YAML or the schema is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    with open(path, encoding="utf-8") as f:
        content = _strip_code_fences(f.read())

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        rules = Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e

    # Tag and attribute names are checked by the allow-list itself
    try:
        rules.allowlist_config()
    except AllowlistConfigError as e:
        raise ValueError(f"Rules validation failed: {'; '.join(e.errors)}") from e

    logger.info("Loaded rules %s (version %s)", path, rules.project.rules_version)
    return rules
