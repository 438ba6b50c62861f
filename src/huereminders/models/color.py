import colorsys
import math

from pydantic import BaseModel, Field

HUE_SCALE = 65535
SAT_SCALE = 254
BRI_SCALE = 254

MIREK_MIN = 153
MIREK_MAX = 500
KELVIN_MAX = 6500
KELVIN_MIN = 2000


class LightColor(BaseModel):
    """Perceptual color, every component normalized to 0..1. Alpha is never sent to the bridge."""
    model_config = {"frozen": True}

    hue: float = Field(..., ge=0.0, le=1.0)
    saturation: float = Field(..., ge=0.0, le=1.0)
    brightness: float = Field(..., ge=0.0, le=1.0)
    alpha: float = Field(1.0, ge=0.0, le=1.0)


WHITE = LightColor(hue=0.0, saturation=0.0, brightness=1.0)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def to_bridge_units(color: LightColor) -> tuple[int, int, int]:
    """Bridge integer ranges, truncated toward zero (0.5 hue -> 32767, not 32768)."""
    return (
        int(color.hue * HUE_SCALE),
        int(color.saturation * SAT_SCALE),
        int(color.brightness * BRI_SCALE),
    )


def from_bridge_units(hue: float, sat: float, bri: float = BRI_SCALE) -> LightColor:
    return LightColor(
        hue=_clamp(hue / HUE_SCALE, 0.0, 1.0),
        saturation=_clamp(sat / SAT_SCALE, 0.0, 1.0),
        brightness=_clamp(bri / BRI_SCALE, 0.0, 1.0),
    )


def kelvin_to_rgb(kelvin: float) -> tuple[float, float, float]:
    """Approximate the RGB of a black-body radiator, each channel in 0..1.

    Tanner Helland's fit:
    http://www.tannerhelland.com/4435/convert-temperature-rgb-algorithm-code/
    """
    if kelvin <= 0:
        raise ValueError(f"'kelvin' must be positive!\n{kelvin=}")

    percent = kelvin / 100

    if percent <= 66:
        red = 255.0
        green = 99.4708025861 * math.log(percent) - 161.1195681661
    else:
        red = 329.698727446 * pow(percent - 60, -0.1332047592)
        green = 288.1221695283 * pow(percent - 60, -0.0755148492)

    if percent >= 66:
        blue = 255.0
    elif percent <= 19:
        blue = 0.0
    else:
        blue = 138.5177312231 * math.log(percent - 10) - 305.0447927307

    return tuple(_clamp(c, 0.0, 255.0) / 255 for c in (red, green, blue))


def mirek_to_kelvin(mirek: float) -> float:
    # linear over the bridge's 153..500 mirek range, 6500K down to 2000K
    unit_per_mirek = (KELVIN_MAX - KELVIN_MIN) / (MIREK_MAX - MIREK_MIN)
    return KELVIN_MAX - (mirek - MIREK_MIN) * unit_per_mirek


def from_rgb(red: float, green: float, blue: float) -> LightColor:
    h, s, v = colorsys.rgb_to_hsv(red, green, blue)
    return LightColor(hue=h, saturation=s, brightness=v)


def from_mirek(mirek: int) -> LightColor:
    """Color of a ct value reported by the bridge. Out-of-range values give pure white."""
    if mirek < MIREK_MIN or mirek > MIREK_MAX:
        return WHITE

    return from_rgb(*kelvin_to_rgb(mirek_to_kelvin(mirek)))
