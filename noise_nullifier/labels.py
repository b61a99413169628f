"""Label extraction from PagerDuty "firing" narratives.

Alertmanager's PagerDuty integration renders each firing alert as a block of
text::

    - Labels:
      - alertname=HighCPU
      - instance=node1
    - Annotations:
      - summary=CPU high

A narrative may hold several such blocks. Labels from all blocks are merged
into one mapping; a key seen with different values becomes an alternation
(``node1|node2``) so that a single regex matcher covers every alert.
"""

LABELS_MARKER = "Labels:"
ANNOTATIONS_MARKER = "Annotations:"
ALTERNATION_SEPARATOR = "|"


def _clean_line(line: str) -> str:
    line = line.strip()
    if line.startswith("- "):
        line = line[2:].strip()
    return line


def extract_block_labels(block: str) -> dict[str, str]:
    """Extract ``key=value`` labels from a single ``Labels:`` block."""
    labels: dict[str, str] = {}
    in_labels = False

    for raw_line in block.split("\n"):
        line = _clean_line(raw_line)

        if line.startswith(LABELS_MARKER):
            in_labels = True
            continue

        if line.startswith(ANNOTATIONS_MARKER):
            break

        if not in_labels or "=" not in line:
            continue

        key, value = line.split("=", 1)
        key, value = key.strip(), value.strip()
        if key and (value or key not in labels):
            labels[key] = value

    return labels


def merge_labels(into: dict[str, str], block_labels: dict[str, str]) -> dict[str, str]:
    """Merge one block's labels into ``into`` in place and return it."""
    for key, value in block_labels.items():
        existing = into.get(key)
        if existing is None:
            into[key] = value
        elif value and existing != value:
            into[key] = f"{existing}{ALTERNATION_SEPARATOR}{value}"
    return into


def parse_labels(narrative: str) -> dict[str, str]:
    """Parse every ``Labels:`` block of a narrative into one merged mapping.

    Text before the first marker is ignored, as are lines that do not look
    like labels. An empty mapping means no labels were found; deciding whether
    that is an error is left to the caller.
    """
    labels: dict[str, str] = {}

    # Everything before the first marker is preamble
    for segment in narrative.split(LABELS_MARKER)[1:]:
        if not segment.strip():
            continue
        merge_labels(labels, extract_block_labels(LABELS_MARKER + segment))

    return labels


def is_alternation(value: str) -> bool:
    return ALTERNATION_SEPARATOR in value
