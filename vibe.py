#!/usr/bin/env python3
"""
Vibe classification pipeline.

Classifies a small color palette into a mood category that drives music search.
Five stages: Color Conversion → Feature Bands → Palette Stats → Scoring → Selection
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

log = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Closed vocabulary, in tie-break order
VIBES = (
    'energetic',
    'cozy',
    'moody',
    'dreamy',
    'intense',
    'chill',
    'uplifting',
    'melancholic',
    'christmas',
    'halloween',
)
FALLBACK_VIBE = 'neutral'
CONFIDENCE_FLOOR = 15  # Winning score must exceed this

# Band thresholds (lower edge inclusive)
SATURATION_BANDS = (('very_high', 0.7), ('high', 0.5), ('mid', 0.25), ('low', 0.0))
LIGHTNESS_BANDS = (('very_bright', 0.75), ('bright', 0.55), ('mid', 0.35),
                   ('dark', 0.2), ('very_dark', 0.0))
HUE_SECTORS = (('orange', 30), ('yellow', 60), ('green', 90), ('cyan', 165),
               ('blue', 195), ('purple', 260), ('red', 330))
MAGENTA_START = 300  # Warm end of the purple sector
NEUTRAL_SATURATION = 0.08  # Below this a sample has no usable hue

# Palette-wide cutoffs
BRIGHT_CUTOFF = 0.5
DARK_CUTOFF = 0.4
NEAR_BLACK_CUTOFF = 0.2

# Christmas detector
CHRISTMAS_RED_HUES = ((340, 360), (0, 20))
CHRISTMAS_GREEN_HUES = ((90, 150),)
CHRISTMAS_BASE = 18
CHRISTMAS_PER_SAMPLE = 3
CHRISTMAS_SATURATION_WEIGHT = 10

# Halloween detector
HALLOWEEN_ORANGE_HUES = ((20, 45),)
HALLOWEEN_MIN_NEAR_BLACK = 2
HALLOWEEN_BASE = 28
HALLOWEEN_PER_NEAR_BLACK = 3
HALLOWEEN_PURPLE_ACCENT = 8
HALLOWEEN_VIVID_ORANGE = 6

BRIGHT_BANDS = ('bright', 'very_bright')
DARK_BANDS = ('dark', 'very_dark')


class EmptyPaletteError(ValueError):
    """Raised when a palette has no colors to classify."""


# =============================================================================
# Stage 1: Color Conversion
# =============================================================================

@dataclass(frozen=True)
class HSLColor:
    """Hue in whole degrees [0, 360), saturation and lightness in [0, 1]."""
    h: int
    s: float
    l: float

    def __iter__(self):
        return iter((self.h, self.s, self.l))


def rgb_to_hsl(r: int, g: int, b: int) -> HSLColor:
    """Convert 0-255 RGB channels to HSL.

    Hue is rounded to whole degrees, saturation and lightness to two decimals,
    so band comparisons are not at the mercy of float noise. Achromatic colors
    get hue 0.
    """
    r, g, b = r / 255.0, g / 255.0, b / 255.0
    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2

    if high == low:
        return HSLColor(0, 0.0, round(lightness, 2))

    d = high - low
    saturation = d / (2 - high - low) if lightness > 0.5 else d / (high + low)

    if high == r:
        hue = (g - b) / d + (6 if g < b else 0)
    elif high == g:
        hue = (b - r) / d + 2
    else:
        hue = (r - g) / d + 4

    return HSLColor(round(hue * 60) % 360, round(saturation, 2), round(lightness, 2))


def rgb_to_hex(rgb: tuple) -> str:
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


# =============================================================================
# Stage 2: Feature Bands
# =============================================================================

@dataclass(frozen=True)
class FeatureBands:
    """Qualitative reading of one sample."""
    color: HSLColor
    hue: str  # 'red', 'orange', 'yellow', 'green', 'cyan', 'blue', 'purple'
    saturation: str  # 'very_high', 'high', 'mid', 'low'
    lightness: str  # 'very_bright', 'bright', 'mid', 'dark', 'very_dark'
    neutral: bool  # Too gray to carry hue temperature
    warm: bool
    cool: bool

    @property
    def magenta(self) -> bool:
        return not self.neutral and MAGENTA_START <= self.color.h < HUE_SECTORS[-1][1]


def hue_sector(hue: float) -> str:
    """Name the hue sector; red wraps around 0°."""
    sector = 'red'
    for name, start in HUE_SECTORS:
        if hue >= start:
            sector = name
    return sector


def _band(value: float, bands: tuple) -> str:
    for name, lower in bands:
        if value >= lower:
            return name
    return bands[-1][0]


def classify_bands(color: HSLColor) -> FeatureBands:
    """Stage 2: Bucket one HSL color along hue, saturation and lightness."""
    hue = hue_sector(color.h)
    neutral = color.s < NEUTRAL_SATURATION
    warm = not neutral and (hue in ('red', 'orange') or color.h >= MAGENTA_START)
    cool = not neutral and hue in ('blue', 'cyan')

    return FeatureBands(
        color=color,
        hue=hue,
        saturation=_band(color.s, SATURATION_BANDS),
        lightness=_band(color.l, LIGHTNESS_BANDS),
        neutral=neutral,
        warm=warm,
        cool=cool,
    )


# =============================================================================
# Stage 3: Palette Stats
# =============================================================================

@dataclass(frozen=True)
class PaletteStats:
    """Palette-wide aggregates."""
    count: int
    avg_saturation: float
    avg_lightness: float
    warm_count: int
    cool_count: int
    bright_count: int  # lightness >= BRIGHT_CUTOFF
    dark_count: int  # lightness < DARK_CUTOFF
    very_dark_count: int  # lightness < NEAR_BLACK_CUTOFF

    @property
    def is_warm(self) -> bool:
        return self.warm_count > self.cool_count

    @property
    def is_cool(self) -> bool:
        return self.cool_count > self.warm_count

    @property
    def is_bright(self) -> bool:
        return self.bright_count * 2 > self.count

    @property
    def is_dark(self) -> bool:
        return self.dark_count * 2 > self.count


def aggregate_palette(bands: Sequence[FeatureBands]) -> PaletteStats:
    """
    Stage 3: Reduce per-sample bands to palette statistics in a single pass.

    Raises:
        EmptyPaletteError: If there are no samples
    """
    if not bands:
        raise EmptyPaletteError("Cannot classify an empty palette")

    total_s = total_l = 0.0
    warm = cool = bright = dark = very_dark = 0

    for b in bands:
        total_s += b.color.s
        total_l += b.color.l
        warm += b.warm
        cool += b.cool
        bright += b.color.l >= BRIGHT_CUTOFF
        dark += b.color.l < DARK_CUTOFF
        very_dark += b.color.l < NEAR_BLACK_CUTOFF

    n = len(bands)
    return PaletteStats(
        count=n,
        avg_saturation=total_s / n,
        avg_lightness=total_l / n,
        warm_count=warm,
        cool_count=cool,
        bright_count=bright,
        dark_count=dark,
        very_dark_count=very_dark,
    )


# =============================================================================
# Stage 4: Scoring
# =============================================================================

def in_hue_window(hue: float, windows: tuple) -> bool:
    """True if hue falls in any of the inclusive (start, end) windows."""
    return any(start <= hue <= end for start, end in windows)


def christmas_bonus(bands: Sequence[FeatureBands], stats: PaletteStats) -> float:
    """Red and green together, scaled by how many and how saturated.

    Either color alone scores nothing.
    """
    reds = [b for b in bands
            if in_hue_window(b.color.h, CHRISTMAS_RED_HUES)
            and b.color.s > 0.5 and 0.3 < b.color.l < 0.7]
    greens = [b for b in bands
              if in_hue_window(b.color.h, CHRISTMAS_GREEN_HUES)
              and b.color.s > 0.35 and 0.2 < b.color.l < 0.6]

    if not reds or not greens:
        return 0.0

    qualifiers = reds + greens
    mean_saturation = sum(b.color.s for b in qualifiers) / len(qualifiers)
    return (CHRISTMAS_BASE
            + CHRISTMAS_PER_SAMPLE * len(qualifiers)
            + CHRISTMAS_SATURATION_WEIGHT * mean_saturation)


def halloween_bonus(bands: Sequence[FeatureBands], stats: PaletteStats) -> float:
    """Saturated orange against at least two near-blacks.

    A purple accent and a very saturated orange push the bonus higher.
    """
    oranges = [b for b in bands
               if in_hue_window(b.color.h, HALLOWEEN_ORANGE_HUES)
               and b.color.s > 0.6 and b.color.l > 0.35]

    if not oranges or stats.very_dark_count < HALLOWEEN_MIN_NEAR_BLACK:
        return 0.0

    bonus = HALLOWEEN_BASE + HALLOWEEN_PER_NEAR_BLACK * stats.very_dark_count
    if any(b.hue == 'purple' and not b.neutral for b in bands):
        bonus += HALLOWEEN_PURPLE_ACCENT
    if any(b.saturation == 'very_high' for b in oranges):
        bonus += HALLOWEEN_VIVID_ORANGE
    return bonus


# Pattern detectors: vibe -> detector
PATTERN_DETECTORS = {
    'christmas': christmas_bonus,
    'halloween': halloween_bonus,
}


@dataclass(frozen=True)
class Rule:
    """A scoring rule: when condition holds, add delta to vibe."""
    name: str
    vibe: str
    delta: int
    condition: Callable


# Evaluated once per sample against FeatureBands
SAMPLE_RULES = [
    # Energetic
    Rule('vivid_bright', 'energetic', 10,
         lambda b: b.saturation == 'very_high' and b.lightness in BRIGHT_BANDS),
    Rule('vivid_bright_warm', 'energetic', 4,
         lambda b: b.saturation == 'very_high' and b.lightness in BRIGHT_BANDS and b.warm),

    # Cozy
    Rule('warm_soft', 'cozy', 9,
         lambda b: b.warm and b.saturation in ('mid', 'high') and b.lightness in ('mid', 'bright')),
    Rule('muted_orange', 'cozy', 6,
         lambda b: b.hue == 'orange' and b.saturation == 'mid'),

    # Moody
    Rule('cool_shadow', 'moody', 10,
         lambda b: b.cool and b.lightness in DARK_BANDS),
    Rule('gray_shadow', 'moody', 7,
         lambda b: b.saturation == 'low' and b.lightness in DARK_BANDS),
    Rule('dark_purple', 'moody', 5,
         lambda b: not b.neutral and b.hue == 'purple' and b.lightness == 'dark'),

    # Dreamy
    Rule('pastel', 'dreamy', 9,
         lambda b: b.saturation == 'mid' and b.lightness in BRIGHT_BANDS),
    Rule('light_purple', 'dreamy', 7,
         lambda b: not b.neutral and b.hue == 'purple' and b.lightness in BRIGHT_BANDS),
    Rule('pale_magenta', 'dreamy', 6,
         lambda b: b.magenta and b.lightness == 'very_bright' and b.saturation == 'mid'),

    # Intense
    Rule('vivid_dark', 'intense', 10,
         lambda b: b.saturation == 'very_high' and b.lightness in DARK_BANDS),
    Rule('deep_red_or_blue', 'intense', 6,
         lambda b: b.hue in ('red', 'blue') and b.saturation == 'very_high' and b.lightness == 'dark'),

    # Chill
    Rule('soft_gray', 'chill', 7,
         lambda b: b.saturation == 'low' and b.lightness == 'bright'),
    Rule('soft_green', 'chill', 8,
         lambda b: not b.neutral and b.hue == 'green' and b.saturation in ('low', 'mid')
         and b.lightness in BRIGHT_BANDS),
    Rule('darkness', 'chill', -12,
         lambda b: b.lightness in DARK_BANDS),

    # Uplifting
    Rule('saturated_bright', 'uplifting', 10,
         lambda b: b.saturation in ('high', 'very_high') and b.lightness in BRIGHT_BANDS),
    Rule('sunny', 'uplifting', 7,
         lambda b: b.hue in ('yellow', 'green') and b.lightness == 'very_bright' and b.saturation == 'high'),

    # Melancholic
    Rule('washed_out', 'melancholic', 8,
         lambda b: not b.neutral and b.saturation == 'low' and b.lightness == 'mid'),
    Rule('faded_blue', 'melancholic', 6,
         lambda b: b.cool and b.saturation in ('low', 'mid') and b.lightness == 'mid'),
]

# Evaluated once per palette against PaletteStats
PALETTE_RULES = [
    Rule('bright_saturated', 'energetic', 8,
         lambda s: s.is_bright and s.avg_saturation > 0.5),
    Rule('bright_saturated', 'uplifting', 8,
         lambda s: s.is_bright and s.avg_saturation > 0.5),

    Rule('dark_muted', 'moody', 15,
         lambda s: s.is_dark and s.avg_saturation < 0.4),
    Rule('dark_muted', 'melancholic', 7,
         lambda s: s.is_dark and s.avg_saturation < 0.4),
    Rule('dark_muted', 'chill', -15,
         lambda s: s.is_dark and s.avg_saturation < 0.4),

    Rule('dark_saturated', 'intense', 12,
         lambda s: s.is_dark and s.avg_saturation >= 0.4),
    Rule('dark_saturated', 'moody', 7,
         lambda s: s.is_dark and s.avg_saturation >= 0.4),

    Rule('warm_midtones', 'cozy', 10,
         lambda s: s.is_warm and 0.5 < s.avg_lightness < 0.75),

    Rule('cool_dark', 'moody', 10,
         lambda s: s.is_cool and s.is_dark),
]


def new_score_table() -> dict:
    return {vibe: 0.0 for vibe in VIBES}


def apply_rules(scores: dict, rules: list, subject) -> None:
    """Add the delta of every rule whose condition holds for subject."""
    for rule in rules:
        if rule.condition(subject):
            scores[rule.vibe] += rule.delta


def detect_patterns(bands: Sequence[FeatureBands], stats: PaletteStats) -> dict:
    """Run every pattern detector; returns vibe -> bonus."""
    bonuses = {}
    for vibe, detector in PATTERN_DETECTORS.items():
        bonuses[vibe] = detector(bands, stats)
        if bonuses[vibe] > 0:
            log.debug("%s pattern detected (+%.1f)", vibe, bonuses[vibe])
    return bonuses


def score_palette(bands: Sequence[FeatureBands], stats: PaletteStats) -> tuple[dict, dict]:
    """Stage 4: Accumulate pattern bonuses and rule deltas.

    Returns:
        Tuple of (scores, bonuses)
    """
    scores = new_score_table()

    bonuses = detect_patterns(bands, stats)
    for vibe, bonus in bonuses.items():
        scores[vibe] += bonus

    for b in bands:
        apply_rules(scores, SAMPLE_RULES, b)
    apply_rules(scores, PALETTE_RULES, stats)

    return scores, bonuses


# =============================================================================
# Stage 5: Selection
# =============================================================================

def select_winner(scores: dict, floor: float = CONFIDENCE_FLOOR) -> tuple[str, float]:
    """
    Pick the highest score, scanning in VIBES order so ties go to the
    earlier category. Falls back to 'neutral' unless the best score exceeds
    the floor.

    Returns:
        Tuple of (vibe, score)
    """
    winner = None
    best = None
    for vibe in VIBES:
        score = scores.get(vibe, 0.0)
        if best is None or score > best:
            winner, best = vibe, score

    if best <= floor:
        return FALLBACK_VIBE, best
    return winner, best


def display_name(vibe: str) -> str:
    return vibe.capitalize()


# =============================================================================
# Main Pipeline
# =============================================================================

@dataclass
class VibeAnalysis:
    """Everything the pipeline derived from one palette."""
    samples: list  # RGB tuples, in input order
    bands: list  # FeatureBands per sample
    stats: PaletteStats
    bonuses: dict  # vibe -> pattern detector bonus
    scores: dict  # vibe -> final score
    vibe: str  # Display name, e.g. 'Christmas'
    score: float  # Winning (or best, if fallback) score


def analyze_palette(samples: Sequence[tuple]) -> VibeAnalysis:
    """Run stages 1-5 on a palette of RGB tuples.

    Raises:
        EmptyPaletteError: If samples is empty
    """
    if not samples:
        raise EmptyPaletteError("Cannot classify an empty palette")

    samples = [tuple(int(c) for c in rgb) for rgb in samples]

    # Stages 1-2: Convert and band every sample before aggregating
    bands = [classify_bands(rgb_to_hsl(*rgb)) for rgb in samples]

    # Stage 3: Palette stats
    stats = aggregate_palette(bands)
    log.debug("palette stats: %s", stats)

    # Stage 4: Scoring
    scores, bonuses = score_palette(bands, stats)
    log.debug("vibe scores: %s", scores)

    # Stage 5: Selection
    vibe, score = select_winner(scores)
    name = display_name(vibe)

    return VibeAnalysis(
        samples=samples,
        bands=bands,
        stats=stats,
        bonuses=bonuses,
        scores=scores,
        vibe=name,
        score=score,
    )


def classify_vibe(samples: Sequence[tuple]) -> str:
    """Classify a palette; returns the display name of the vibe."""
    return analyze_palette(samples).vibe


# =============================================================================
# Render
# =============================================================================

def render(analysis: VibeAnalysis, search_terms: Optional[list] = None) -> str:
    """Render an analysis as prose."""
    stats = analysis.stats
    lines = []

    lines.append(f"VIBE: {analysis.vibe} (score {analysis.score:.1f})")
    lines.append(f"Saturation avg: {stats.avg_saturation:.2f} | Lightness avg: {stats.avg_lightness:.2f}")
    lines.append(f"Warm: {stats.warm_count} | Cool: {stats.cool_count} | "
                 f"Bright: {stats.bright_count} | Dark: {stats.dark_count} | Near-black: {stats.very_dark_count}")
    lines.append("")

    lines.append("COLORS:")
    lines.append("")
    for rgb, b in zip(analysis.samples, analysis.bands):
        h, s, l = b.color
        hue = 'neutral' if b.neutral else b.hue
        lines.append(f"RGB{rgb} → HSL({h}°, {s:.2f}, {l:.2f})")
        lines.append(f"  {hue} / {b.saturation} saturation / {b.lightness.replace('_', ' ')}")
    lines.append("")

    lines.append("SCORES:")
    lines.append("")
    ranked = sorted(VIBES, key=lambda v: -analysis.scores[v])
    for vibe in ranked:
        bonus = analysis.bonuses.get(vibe, 0.0)
        suffix = f" (pattern +{bonus:.1f})" if bonus > 0 else ""
        lines.append(f"  {display_name(vibe):<12} {analysis.scores[vibe]:6.1f}{suffix}")

    if search_terms:
        lines.append("")
        lines.append("SEARCH TERMS:")
        for term in search_terms:
            lines.append(f"  - {term}")

    return "\n".join(lines)


def text_color_for_background(lightness: float) -> str:
    """Return black or white text color based on background lightness."""
    return "#000" if lightness > 0.5 else "#fff"


def render_html(analysis: VibeAnalysis, image_path: str, search_terms: Optional[list] = None) -> str:
    """Render an analysis as a standalone HTML page."""
    from html import escape

    safe_path = escape(image_path)

    css = """
        * { box-sizing: border-box; margin: 0; padding: 0; }
        body {
            font-family: system-ui, -apple-system, sans-serif;
            background: #f5f5f5;
            color: #333;
            line-height: 1.5;
            padding: 2rem;
            max-width: 900px;
            margin: 0 auto;
        }
        h1 { font-size: 1.5rem; margin-bottom: 0.5rem; }
        h2 { font-size: 1.2rem; margin: 2rem 0 1rem; border-bottom: 1px solid #ddd; padding-bottom: 0.5rem; }
        .meta { color: #666; font-size: 0.9rem; margin-bottom: 1rem; }
        .palette-strip {
            display: flex;
            height: 80px;
            border-radius: 8px;
            overflow: hidden;
            box-shadow: 0 2px 8px rgba(0,0,0,0.1);
            margin: 1.5rem 0;
        }
        .palette-strip .swatch {
            flex: 1;
            display: flex;
            align-items: flex-end;
            justify-content: center;
            padding: 0.5rem;
            font-size: 0.7rem;
            font-weight: 500;
        }
        .color-card {
            background: #fff;
            border-radius: 8px;
            padding: 1rem;
            margin-bottom: 1rem;
            box-shadow: 0 1px 3px rgba(0,0,0,0.08);
            display: grid;
            grid-template-columns: 60px 1fr;
            gap: 1rem;
        }
        .color-card .swatch { width: 60px; height: 60px; border-radius: 6px; }
        .color-card .info { font-size: 0.85rem; }
        .color-card .values { font-family: monospace; color: #555; font-size: 0.8rem; }
        .score-row { display: grid; grid-template-columns: 120px 1fr 60px; gap: 0.5rem; align-items: center; font-size: 0.85rem; margin-bottom: 0.35rem; }
        .score-bar { height: 12px; border-radius: 4px; background: #1DB954; }
        .score-bar.negative { background: #ef4444; }
        .winner { font-weight: 600; }
        .terms li { margin-left: 1.25rem; font-size: 0.9rem; }
    """

    lines = [
        '<!DOCTYPE html>',
        '<html lang="en">',
        '<head>',
        '  <meta charset="UTF-8">',
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">',
        f'  <title>Vibe: {safe_path}</title>',
        f'  <style>{css}</style>',
        '</head>',
        '<body>',
    ]

    stats = analysis.stats
    lines.append(f'<h1>{analysis.vibe}</h1>')
    lines.append(f'<p class="meta">Source: {safe_path}</p>')
    lines.append(f'<p class="meta">Score {analysis.score:.1f} · Saturation {stats.avg_saturation:.2f} · '
                 f'Lightness {stats.avg_lightness:.2f} · {stats.count} colors</p>')

    # Palette strip
    lines.append('<div class="palette-strip">')
    for rgb, b in zip(analysis.samples, analysis.bands):
        hex_val = rgb_to_hex(rgb)
        lines.append(f'  <div class="swatch" style="background:{hex_val}; '
                     f'color:{text_color_for_background(b.color.l)}">{hex_val}</div>')
    lines.append('</div>')

    # Colors
    lines.append('<h2>Colors</h2>')
    for rgb, b in zip(analysis.samples, analysis.bands):
        h, s, l = b.color
        hue = 'neutral' if b.neutral else b.hue
        lines.append('<div class="color-card">')
        lines.append(f'  <div class="swatch" style="background:rgb{rgb}"></div>')
        lines.append('  <div class="info">')
        lines.append(f'    <div>{hue} · {b.saturation} saturation · {b.lightness.replace("_", " ")}</div>')
        lines.append(f'    <div class="values">RGB{rgb} · HSL({h}°, {s:.2f}, {l:.2f})</div>')
        lines.append('  </div>')
        lines.append('</div>')

    # Scores
    lines.append('<h2>Scores</h2>')
    top = max(max(abs(v) for v in analysis.scores.values()), 1)
    for vibe in sorted(VIBES, key=lambda v: -analysis.scores[v]):
        score = analysis.scores[vibe]
        width = abs(score) / top * 100
        row_class = 'score-row winner' if display_name(vibe) == analysis.vibe else 'score-row'
        bar_class = 'score-bar negative' if score < 0 else 'score-bar'
        lines.append(f'<div class="{row_class}"><span>{display_name(vibe)}</span>'
                     f'<div class="{bar_class}" style="width:{width:.0f}%"></div>'
                     f'<span>{score:.1f}</span></div>')

    if search_terms:
        lines.append('<h2>Search Terms</h2>')
        lines.append('<ul class="terms">')
        for term in search_terms:
            lines.append(f'  <li>{escape(term)}</li>')
        lines.append('</ul>')

    lines.append('</body>')
    lines.append('</html>')

    return '\n'.join(lines)


def analyze_image(image_path: str, n_colors: int = 5, downscale: bool = True) -> VibeAnalysis:
    """Extract a palette from an image and classify it."""
    from extract_colors import extract_palette

    palette = extract_palette(image_path, n_colors, downscale=downscale)
    return analyze_palette(palette)


# =============================================================================
# CLI
# =============================================================================

if __name__ == '__main__':
    import argparse
    import sys
    from pathlib import Path

    parser = argparse.ArgumentParser(
        description='Classify the vibe of an image from its color palette.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Path to the image file'
    )
    parser.add_argument(
        '--colors', '-n',
        type=int,
        default=5,
        help='Number of palette colors to extract (default: 5)'
    )
    parser.add_argument(
        '--output', '-o',
        nargs='?',
        const=True,
        default=None,
        help='Write HTML report. Optionally specify path, otherwise auto-names from input.'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Log palette stats and scores'
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )
    image_path = Path(args.input)

    try:
        analysis = analyze_image(str(image_path), args.colors)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error analyzing image: {e}", file=sys.stderr)
        sys.exit(1)

    from search_terms import search_terms_for

    terms = search_terms_for(analysis.vibe)
    print(render(analysis, terms))

    if args.output:
        if args.output is True:
            output_path = image_path.with_name(f"{image_path.stem}-vibe.html")
        else:
            output_path = Path(args.output)

        try:
            output_path.write_text(render_html(analysis, str(image_path), terms))
            print(f"\nWrote: {output_path}")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            sys.exit(1)
