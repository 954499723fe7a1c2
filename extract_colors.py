#!/usr/bin/env python3
"""
Extract a small representative palette from an image.

Pixels are quantized in LAB space, nearby bins are merged by pixel weight, and
the most-covered clusters are returned as RGB tuples.
"""

import numpy as np
from PIL import Image


# =============================================================================
# Constants
# =============================================================================

JND = 2.3  # Just Noticeable Difference in LAB units
PALETTE_SCALE = 5.0  # Quantization bins: ~12 LAB units
MERGE_DISTANCE = 20.0  # LAB distance under which bins join a cluster
DEFAULT_PALETTE_SIZE = 5
DOWNSCALE_SIZE = 256  # Longest side after downscaling

# Image size limits (security: prevent decompression bombs)
MAX_IMAGE_PIXELS = 50_000_000  # 50 megapixels
MAX_IMAGE_DIMENSION = 10_000  # 10k pixels per side


# =============================================================================
# Color Conversion
# =============================================================================

def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert RGB array (0-255) to LAB color space."""
    rgb_norm = rgb.astype(np.float64) / 255.0

    # Apply gamma correction
    mask = rgb_norm > 0.04045
    rgb_linear = np.where(mask, ((rgb_norm + 0.055) / 1.055) ** 2.4, rgb_norm / 12.92)

    # RGB to XYZ matrix
    r, g, b = rgb_linear[:, 0], rgb_linear[:, 1], rgb_linear[:, 2]
    x = r * 0.4124564 + g * 0.3575761 + b * 0.1804375
    y = r * 0.2126729 + g * 0.7151522 + b * 0.0721750
    z = r * 0.0193339 + g * 0.1191920 + b * 0.9503041

    # XYZ to LAB (D65 reference white)
    xn, yn, zn = 0.95047, 1.0, 1.08883
    x, y, z = x / xn, y / yn, z / zn

    epsilon = 0.008856
    kappa = 903.3
    fx = np.where(x > epsilon, np.cbrt(x), (kappa * x + 16) / 116)
    fy = np.where(y > epsilon, np.cbrt(y), (kappa * y + 16) / 116)
    fz = np.where(z > epsilon, np.cbrt(z), (kappa * z + 16) / 116)

    L = 116 * fy - 16
    a = 500 * (fx - fy)
    b_val = 200 * (fy - fz)

    return np.column_stack([L, a, b_val])


def lab_to_rgb(lab: np.ndarray) -> np.ndarray:
    """Convert an (n, 3) LAB array to RGB (0-255)."""
    L, a, b = lab[:, 0], lab[:, 1], lab[:, 2]

    fy = (L + 16) / 116
    fx = a / 500 + fy
    fz = fy - b / 200

    epsilon = 0.008856
    kappa = 903.3

    x = np.where(fx**3 > epsilon, fx**3, (116 * fx - 16) / kappa)
    y = np.where(L > kappa * epsilon, ((L + 16) / 116) ** 3, L / kappa)
    z = np.where(fz**3 > epsilon, fz**3, (116 * fz - 16) / kappa)

    x *= 0.95047
    z *= 1.08883

    r = x * 3.2404542 - y * 1.5371385 - z * 0.4985314
    g = -x * 0.9692660 + y * 1.8760108 + z * 0.0415560
    b_out = x * 0.0556434 - y * 0.2040259 + z * 1.0572252

    rgb_linear = np.column_stack([r, g, b_out])
    mask = rgb_linear > 0.0031308
    rgb = np.where(mask, 1.055 * np.power(np.clip(rgb_linear, 0, None), 1/2.4) - 0.055, 12.92 * rgb_linear)

    return np.clip(np.round(rgb * 255), 0, 255).astype(np.uint8)


# =============================================================================
# Image Loading
# =============================================================================

def load_pixels(image_path: str, downscale: bool = True) -> np.ndarray:
    """
    Load an image as an (n, 3) uint8 RGB pixel array.

    Raises:
        FileNotFoundError: If image file doesn't exist
        ValueError: If file is not a valid image or exceeds size limits
    """
    try:
        img = Image.open(image_path)
    except FileNotFoundError:
        raise FileNotFoundError(f"Image not found: {image_path}")
    except Exception as e:
        raise ValueError(f"Could not open image: {e}")

    width, height = img.size
    if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
        raise ValueError(
            f"Image dimensions {width}x{height} exceed maximum "
            f"{MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION}"
        )
    if width * height > MAX_IMAGE_PIXELS:
        raise ValueError(
            f"Image has {width * height:,} pixels, exceeding maximum {MAX_IMAGE_PIXELS:,}"
        )

    img = img.convert('RGB')
    if downscale:
        img.thumbnail((DOWNSCALE_SIZE, DOWNSCALE_SIZE))

    return np.array(img).reshape(-1, 3)


# =============================================================================
# Palette Extraction
# =============================================================================

def quantize_pixels(pixels: np.ndarray, scale: float = PALETTE_SCALE) -> np.ndarray:
    """
    Bin RGB pixels in LAB space.

    Returns:
        numpy array of shape (n_bins, 4) where columns are [L, a, b, pixels],
        LAB being the mean of the member pixels. Sorted by pixel count descending.
    """
    lab = rgb_to_lab(pixels)
    bin_size = scale * JND
    binned = np.round(lab / bin_size).astype(np.int32)

    unique_bins, inverse, counts = np.unique(binned, axis=0, return_inverse=True, return_counts=True)
    inverse = inverse.reshape(-1)

    # Mean LAB per bin, so pure colors keep their exact value
    sums = np.zeros((len(unique_bins), 3))
    np.add.at(sums, inverse, lab)
    centers = sums / counts[:, None]

    results = np.column_stack([centers, counts.astype(np.float64)])
    return results[results[:, 3].argsort(kind='stable')[::-1]]


def group_colors(colors: np.ndarray, distance_threshold: float = MERGE_DISTANCE) -> np.ndarray:
    """
    Merge bins into clusters by full LAB distance, weighted by pixel count.

    Lightness takes part in the distance: a palette needs black and white
    kept apart even though they share chromaticity.

    Args:
        colors: Array of shape (n, 4) with columns [L, a, b, pixels], sorted
            by pixels descending
        distance_threshold: Max LAB distance to a cluster center to merge

    Returns:
        Array of shape (n_clusters, 4) with columns [L, a, b, pixels]
        Sorted by pixel count descending.
    """
    clusters = []

    for color in colors:
        lab = color[:3]
        pixels = color[3]

        merged = False
        for cluster in clusters:
            center = cluster[:3] / cluster[3]
            if np.linalg.norm(lab - center) < distance_threshold:
                cluster[:3] += lab * pixels
                cluster[3] += pixels
                merged = True
                break

        if not merged:
            clusters.append(np.array([*(lab * pixels), pixels]))

    results = np.array(clusters)
    results[:, :3] /= results[:, 3:4]

    return results[results[:, 3].argsort(kind='stable')[::-1]]


def extract_palette(image_path: str, n: int = DEFAULT_PALETTE_SIZE,
                    downscale: bool = True) -> list[tuple]:
    """
    Reduce an image to its n most prominent colors.

    Args:
        image_path: Path to the input image
        n: Maximum number of colors to return
        downscale: Shrink to DOWNSCALE_SIZE before quantizing

    Returns:
        List of (r, g, b) tuples ordered by coverage; shorter than n when the
        image has fewer distinct colors.
    """
    if n < 1:
        raise ValueError(f"Palette size must be at least 1, got {n}")

    pixels = load_pixels(image_path, downscale=downscale)
    clusters = group_colors(quantize_pixels(pixels))
    rgb = lab_to_rgb(clusters[:n, :3])

    return [(int(r), int(g), int(b)) for r, g, b in rgb]


def render_swatches(colors: list[tuple], output_path: str) -> None:
    """Save a strip of palette swatches as an image."""
    swatch_size = 80
    padding = 10

    img_width = len(colors) * (swatch_size + padding) + padding
    img_height = swatch_size + 2 * padding

    img = Image.new('RGB', (img_width, img_height), (240, 240, 240))

    from PIL import ImageDraw
    draw = ImageDraw.Draw(img)

    for i, rgb in enumerate(colors):
        x = padding + i * (swatch_size + padding)
        draw.rectangle([x, padding, x + swatch_size, padding + swatch_size], fill=tuple(rgb))

    img.save(output_path)


if __name__ == '__main__':
    import argparse
    import sys

    parser = argparse.ArgumentParser(description='Extract a color palette from an image.')
    parser.add_argument('--input', '-i', required=True, help='Path to the image file')
    parser.add_argument('--colors', '-n', type=int, default=DEFAULT_PALETTE_SIZE,
                        help=f'Number of colors (default: {DEFAULT_PALETTE_SIZE})')
    parser.add_argument('--output', '-o', help='Write a swatch image to this path')

    args = parser.parse_args()

    try:
        palette = extract_palette(args.input, args.colors)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    for rgb in palette:
        print(f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}  RGB{rgb}")

    if args.output:
        render_swatches(palette, args.output)
        print(f"Saved swatches to {args.output}")
