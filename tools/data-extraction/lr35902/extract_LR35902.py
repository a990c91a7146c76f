#!/usr/bin/env python3
"""
Game Boy (LR35902) Instruction Extractor

Extracts the unprefixed and CB-prefixed opcode tables of the Game Boy CPU from
the pastraiser opcode reference page and writes one record per opcode:

    code, operator, operands, bits, size, time, z, n, h, c

Based on the HTML structure of:
http://www.pastraiser.com/cpu/gameboy/gameboy_opcodes.html

Usage:
    python3 extract_LR35902.py [OUTPUT] [--url URL | --input FILE]
                               [--format json|yaml] [--report FILE] [--verbose]

Requirements: pip install requests beautifulsoup4 lxml lark PyYAML
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import requests
import yaml
from bs4 import BeautifulSoup, Tag

# Import shared parsers (handle both direct execution and module import)
sys.path.insert(0, str(Path(__file__).parent.parent))
from cell_grammar import MalformedFieldError
from table_walker import TABLE_PREFIXES, Instruction, TableWalker


# ============================================================================
# Configuration
# ============================================================================

OPCODE_TABLE_URL = "http://www.pastraiser.com/cpu/gameboy/gameboy_opcodes.html"
REQUEST_TIMEOUT = 60

DEFAULT_OUTPUT = Path(__file__).parent / "gameboy_opcodes.json"

# Output suffix → serialization format
OUTPUT_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


# ============================================================================
# Statistics
# ============================================================================

class ExtractionStats:
    """Tracks extraction statistics."""

    def __init__(self):
        self.total_tables = 0
        self.total_instructions = 0
        self.skipped_cells = 0
        self.by_table: Dict[int, int] = {}
        self.by_bits: Dict[int, int] = {}
        self.conditional: List[str] = []

    def add_instruction(self, instr: Instruction):
        """Record instruction statistics."""
        self.total_instructions += 1
        self.by_table[instr.prefix] = self.by_table.get(instr.prefix, 0) + 1
        self.by_bits[instr.bits] = self.by_bits.get(instr.bits, 0) + 1

        if instr.time.is_conditional:
            operands = ",".join(instr.operands)
            self.conditional.append(f"{instr.code:04x} {instr.operator} {operands}".rstrip())


# ============================================================================
# HTML Input
# ============================================================================

def fetch_html(url: str) -> str:
    """Fetch HTML content from URL."""
    print(f"Fetching {url}...")
    try:
        response = requests.get(url, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        print(f"✓ Downloaded {len(response.content):,} bytes")
        return response.text
    except requests.RequestException as e:
        print(f"✗ Failed to fetch: {e}")
        sys.exit(1)


def load_html(path: Path) -> str:
    """Read a saved copy of the opcode page."""
    print(f"Reading {path}...")
    try:
        html_content = path.read_text(encoding='utf-8', errors='replace')
    except OSError as e:
        print(f"✗ Failed to read: {e}")
        sys.exit(1)
    print(f"✓ Read {len(html_content):,} characters")
    return html_content


def find_opcode_tables(html_content: str) -> List[Tag]:
    """
    Locate the opcode tables in the page.

    The page holds the unprefixed table first and the CB-prefixed table
    second; anything after them is ignored.
    """
    soup = BeautifulSoup(html_content, 'lxml')
    tables = soup.find_all('table')
    print(f"Found {len(tables)} tables in document")
    return tables[:len(TABLE_PREFIXES)]


# ============================================================================
# Extraction
# ============================================================================

def extract_instructions(tables: List[Tag], stats: ExtractionStats, verbose: bool = False) -> List[Instruction]:
    """
    Extract all instructions from the opcode tables.

    Raises:
        MalformedFieldError: the page layout no longer matches the parser
    """
    print("\n" + "=" * 70)
    print("EXTRACTING INSTRUCTIONS FROM OPCODE TABLES")
    print("=" * 70)

    walker = TableWalker(verbose=verbose)
    instructions = walker.parse_tables(tables)

    stats.total_tables = len(tables)
    stats.skipped_cells = walker.skipped_cells
    for instr in instructions:
        stats.add_instruction(instr)

    print(f"\n✓ Extracted {len(instructions)} instructions")
    for op_prefix in TABLE_PREFIXES[:len(tables)]:
        print(f"    Prefix {op_prefix:02x}: {stats.by_table.get(op_prefix, 0)}")
    print(f"  Skipped cells (headers, blanks, illegal opcodes): {stats.skipped_cells}")

    return instructions


# ============================================================================
# Output
# ============================================================================

def output_format_for(path: Path) -> str:
    """Serialization format implied by an output file suffix (JSON if unknown)."""
    return OUTPUT_FORMATS.get(path.suffix.lower(), "json")


def serialize_instructions(instructions: List[Instruction], fmt: str) -> str:
    """Render instructions as JSON or YAML text."""
    data = [instr.to_dict() for instr in instructions]

    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    raise ValueError(f"Unknown output format: {fmt}")


def generate_report(stats: ExtractionStats, instructions: List[Instruction]) -> str:
    """Generate extraction report."""
    lines = []
    lines.append("=" * 70)
    lines.append("LR35902 INSTRUCTION EXTRACTION REPORT")
    lines.append("=" * 70)
    lines.append(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    lines.append("")

    lines.append("OVERALL STATISTICS")
    lines.append("-" * 70)
    lines.append(f"Total tables processed: {stats.total_tables}")
    lines.append(f"Total instructions extracted: {stats.total_instructions}")
    lines.append(f"Skipped cells: {stats.skipped_cells}")
    lines.append(f"Unique operators: {len(set(i.operator for i in instructions))}")
    lines.append("")

    lines.append("\nINSTRUCTIONS BY TABLE")
    lines.append("-" * 70)
    for op_prefix in sorted(stats.by_table):
        lines.append(f"Prefix {op_prefix:02x}: {stats.by_table[op_prefix]}")
    lines.append("")

    lines.append("\nIMMEDIATE OPERAND WIDTH")
    lines.append("-" * 70)
    total = stats.total_instructions
    for bits in sorted(stats.by_bits):
        count = stats.by_bits[bits]
        pct = (count / total * 100) if total > 0 else 0
        lines.append(f"{bits:2d} bits: {count}/{total} ({pct:.1f}%)")
    lines.append("")

    lines.append("\nCONDITIONAL TIMING")
    lines.append("-" * 70)
    lines.append(f"Total: {len(stats.conditional)}")
    for entry in stats.conditional:
        lines.append(f"  {entry}")
    lines.append("")

    lines.append("\nOPERATORS")
    lines.append("-" * 70)
    operators = sorted(set(i.operator for i in instructions))
    for i in range(0, len(operators), 10):
        lines.append(f"  {', '.join(operators[i:i+10])}")

    lines.append("")
    lines.append("=" * 70)
    lines.append("END REPORT")
    lines.append("=" * 70)

    return '\n'.join(lines)


# ============================================================================
# Main Pipeline
# ============================================================================

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Extract the Game Boy CPU opcode table from HTML')
    parser.add_argument('output', nargs='?', default=str(DEFAULT_OUTPUT), metavar='OUTPUT',
                        help='Path of the extracted opcode table')
    source = parser.add_mutually_exclusive_group()
    source.add_argument('-u', '--url', default=OPCODE_TABLE_URL,
                        help='URL of the opcode reference page')
    source.add_argument('-i', '--input', help='Read a saved copy of the page instead of fetching it')
    parser.add_argument('-f', '--format', choices=sorted(set(OUTPUT_FORMATS.values())),
                        help='Output format (default: from the OUTPUT suffix)')
    parser.add_argument('--report', help='Also write an extraction report to this path')
    parser.add_argument('-v', '--verbose', action='store_true', help='Show skipped cells and every instruction')
    return parser


def main(argv: Optional[List[str]] = None):
    """Main extraction pipeline."""
    args = build_arg_parser().parse_args(argv)
    output_path = Path(args.output)
    fmt = args.format or output_format_for(output_path)

    print("=" * 70)
    print("LR35902 INSTRUCTION EXTRACTOR")
    print("=" * 70)
    print()

    stats = ExtractionStats()

    if args.input:
        html_content = load_html(Path(args.input))
    else:
        html_content = fetch_html(args.url)

    tables = find_opcode_tables(html_content)
    if not tables:
        print("✗ No opcode tables found. Exiting.")
        sys.exit(1)

    try:
        instructions = extract_instructions(tables, stats, verbose=args.verbose)
    except MalformedFieldError as e:
        print(f"✗ Unexpected cell contents, page layout may have changed: {e}")
        sys.exit(1)

    if not instructions:
        print("✗ No instructions extracted. Exiting.")
        sys.exit(1)

    print("\n" + "=" * 70)
    print("GENERATING OUTPUTS")
    print("=" * 70)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(serialize_instructions(instructions, fmt))

    print(f"✓ Wrote {len(instructions)} instructions to {output_path} ({fmt})")

    if args.report:
        report_path = Path(args.report)
        with open(report_path, 'w', encoding='utf-8') as f:
            f.write(generate_report(stats, instructions))
        print(f"✓ Wrote report to {report_path}")

    print("\n" + "=" * 70)
    print("EXTRACTION COMPLETE")
    print("=" * 70)
    print(f"Total instructions: {len(instructions)}")


if __name__ == "__main__":
    main()
