import re
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# The depletion engine is the only place allowed to drain batch quantities.
CANONICAL_ALLOWLIST = {
    "stockledger/services/stock_adjustment/_depletion.py",
}


def test_no_direct_quantity_mutations_outside_depletion_engine():
    root = PROJECT_ROOT / "stockledger"
    pattern = re.compile(r"\.quantity\s*([+\-]=)")
    violations = []

    for path in root.rglob("*.py"):
        rel_path = path.relative_to(PROJECT_ROOT).as_posix()
        if rel_path in CANONICAL_ALLOWLIST:
            continue

        text = path.read_text(encoding="utf-8")
        for match in pattern.finditer(text):
            line_start = text.rfind("\n", 0, match.start()) + 1
            line_end = text.find("\n", match.start())
            if line_end == -1:
                line_end = len(text)
            line_text = text[line_start:line_end].strip()
            violations.append(f"{rel_path}: {line_text}")

    assert not violations, (
        "Direct quantity mutations detected outside the depletion engine. "
        "Route these call sites through stockledger.services.stock_adjustment: \n- "
        + "\n- ".join(violations)
    )


def test_depletion_engine_is_the_canonical_writer():
    text = (PROJECT_ROOT / "stockledger/services/stock_adjustment/_depletion.py").read_text(encoding="utf-8")
    assert re.search(r"\.quantity\s*-=", text)
