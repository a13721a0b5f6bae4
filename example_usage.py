"""
deckflow usage example

Lays out a single HTML document as slides and writes the deck JSON that a
renderer would consume.

Usage:
    python example_usage.py --html "report.html"
    python example_usage.py --html "report.html" --preset a4_page --slides 8
"""

import sys
import json
import logging
import argparse
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from deckflow.core.config import load_config
from deckflow.pipeline.deck_builder import DeckBuilder


def main():
    parser = argparse.ArgumentParser(description="deckflow example")
    parser.add_argument("--html", required=True, help="HTML file path")
    parser.add_argument("--output", default="./example_output", help="Output directory")
    parser.add_argument("--preset", default="slide_16_9", choices=["slide_16_9", "slide_4_3", "a4_page"],
                        help="Canvas preset")
    parser.add_argument("--config", default=None, help="YAML config file (overrides --preset)")
    parser.add_argument("--slides", type=int, default=None, help="Slide count hint")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    html_path = Path(args.html)
    if not html_path.exists():
        print(f"❌ HTML file not found: {html_path}")
        return 1

    print("\n" + "="*70)
    print("deckflow example")
    print("="*70)
    print(f"HTML: {html_path.name}")
    print(f"Preset: {args.config or args.preset}")
    print("="*70)

    # 1. Config
    config = load_config(path=args.config, preset=None if args.config else args.preset)

    # 2. Build the deck
    print("\n[1/2] Building deck...")
    builder = DeckBuilder(config)
    deck = builder.build_from_html(html_path.read_text(encoding="utf-8"), slide_hint=args.slides)
    print(f"✅ {len(deck.slides)} slides")

    # 3. Save
    print("\n[2/2] Saving deck JSON...")
    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    output_file = output_dir / f"{html_path.stem}_deck.json"
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(deck.to_dict(), f, ensure_ascii=False, indent=2)

    print(f"✅ Deck saved: {output_file}")

    # 4. Summary
    analysis = deck.analysis
    print("\n" + "="*70)
    print("Done")
    print("="*70)
    print(f"📄 Pattern: {analysis.pattern.value} ({analysis.pattern_confidence:.0%})")
    print(f"📊 Complexity: {analysis.complexity:.2f}, sentiment: {analysis.sentiment.value}")
    print(f"🏷️  Topics: {', '.join(analysis.topics[:5]) or '-'}")

    print(f"\n📑 Slides:")
    for slide in deck.slides:
        section = slide.section
        open_recs = len(slide.final_layout.recommendations)
        print(f"   - [{section.type.value}] {section.title} "
              f"({len(slide.blocks)} blocks, {len(slide.charts)} charts, {open_recs} open recommendations)")

    if analysis.suggestions:
        print(f"\n💡 Suggestions:")
        for suggestion in analysis.suggestions:
            print(f"   - {suggestion}")

    print("="*70)

    return 0


if __name__ == "__main__":
    sys.exit(main())
