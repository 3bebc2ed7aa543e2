from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .errors import ConfigValidationError


def _check_int(name: str, value: Any) -> None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigValidationError(
            f"{name}={value!r} must be an int, got {type(value).__name__}"
        )


def _check_positive(name: str, value: int) -> None:
    _check_int(name, value)
    if value <= 0:
        raise ConfigValidationError(f"{name}={value} must be > 0")


def _check_non_negative(name: str, value: int) -> None:
    _check_int(name, value)
    if value < 0:
        raise ConfigValidationError(f"{name}={value} must be >= 0")


# ── Option value types ─────────────────────────────────────────────────


@dataclass(frozen=True)
class Dpi:
    """Render resolution in dots per inch.

    ``y is None`` means one value for both axes (``-r``); otherwise the
    axes are given separately (``-rx`` / ``-ry``).
    """

    x: int
    y: Optional[int] = None

    def __post_init__(self) -> None:
        _check_positive("resolution.x", self.x)
        if self.y is not None:
            _check_positive("resolution.y", self.y)

    @classmethod
    def uniform(cls, dpi: int) -> "Dpi":
        return cls(dpi)

    @classmethod
    def xy(cls, dpi_x: int, dpi_y: int) -> "Dpi":
        return cls(dpi_x, dpi_y)

    @property
    def is_uniform(self) -> bool:
        return self.y is None


@dataclass(frozen=True)
class Scale:
    """Scale pages to a target number of pixels.

    Valid shapes: ``size`` alone (fit inside a size×size box), ``x``
    alone, ``y`` alone, or ``x`` and ``y`` together.
    """

    size: Optional[int] = None
    x: Optional[int] = None
    y: Optional[int] = None

    def __post_init__(self) -> None:
        if self.size is not None:
            if self.x is not None or self.y is not None:
                raise ConfigValidationError(
                    "scale.size cannot be combined with scale.x / scale.y"
                )
            _check_positive("scale.size", self.size)
            return
        if self.x is None and self.y is None:
            raise ConfigValidationError("scale needs size, x, or y")
        if self.x is not None:
            _check_positive("scale.x", self.x)
        if self.y is not None:
            _check_positive("scale.y", self.y)

    @classmethod
    def uniform(cls, size: int) -> "Scale":
        return cls(size=size)

    @classmethod
    def to_x(cls, pixels: int) -> "Scale":
        return cls(x=pixels)

    @classmethod
    def to_y(cls, pixels: int) -> "Scale":
        return cls(y=pixels)

    @classmethod
    def xy(cls, pixels_x: int, pixels_y: int) -> "Scale":
        return cls(x=pixels_x, y=pixels_y)


@dataclass(frozen=True)
class Crop:
    """Crop rectangle in pixels: top-left corner plus width and height."""

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        for name in ("x", "y", "width", "height"):
            _check_non_negative(f"crop.{name}", getattr(self, name))

    @classmethod
    def from_corners(cls, x1: int, y1: int, x2: int, y2: int) -> "Crop":
        """Build a crop from two opposite corners given in any order."""
        for name, value in (("x1", x1), ("y1", y1), ("x2", x2), ("y2", y2)):
            _check_non_negative(f"crop.{name}", value)
        min_x, max_x = (x1, x2) if x1 < x2 else (x2, x1)
        min_y, max_y = (y1, y2) if y1 < y2 else (y2, y1)
        return cls(min_x, min_y, max_x - min_x, max_y - min_y)

    @classmethod
    def from_top_left(
        cls, width: int, height: int, top_left: Tuple[int, int]
    ) -> "Crop":
        return cls(top_left[0], top_left[1], width, height)

    @classmethod
    def square(cls, size: int, top_left: Tuple[int, int]) -> "Crop":
        return cls(top_left[0], top_left[1], size, size)

    def to_tuple(self) -> Tuple[int, int, int, int]:
        return (self.x, self.y, self.width, self.height)


class PasswordKind(str, Enum):
    """Which PDF password a :class:`Password` carries."""

    user = "user"
    owner = "owner"


@dataclass(frozen=True)
class Password:
    """Password used to unlock an encrypted PDF."""

    kind: PasswordKind
    value: str = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.kind, PasswordKind):
            try:
                object.__setattr__(self, "kind", PasswordKind(self.kind))
            except ValueError as exc:
                raise ConfigValidationError(
                    f"password.kind={self.kind!r} must be 'user' or 'owner'"
                ) from exc
        if not isinstance(self.value, str):
            raise ConfigValidationError("password.value must be a str")

    @classmethod
    def user(cls, value: str) -> "Password":
        return cls(PasswordKind.user, value)

    @classmethod
    def owner(cls, value: str) -> "Password":
        return cls(PasswordKind.owner, value)


class RenderTool(str, Enum):
    """External poppler renderer used for rasterization."""

    pdftoppm = "pdftoppm"
    pdftocairo = "pdftocairo"


# ── Render configuration ───────────────────────────────────────────────

_CONFIG_KEYS = ("resolution", "scale", "grayscale", "crop", "password", "tool")


@dataclass(frozen=True)
class RenderConfig:
    """Options for rendering PDF pages.

    Every field has a default, so ``RenderConfig()`` renders JPEGs at
    150 DPI with pdftoppm.  Use :func:`dataclasses.replace` to derive a
    modified copy.
    """

    # Resolution in dots per inch. An int means uniform DPI, a tuple (x, y).
    resolution: Dpi = field(default_factory=lambda: Dpi.uniform(150))
    # Scale pages to a certain number of pixels.
    scale: Optional[Scale] = None
    # Render pages in grayscale.
    grayscale: bool = False
    # Crop a specific section of the page.
    crop: Optional[Crop] = None
    # Password to unlock encrypted PDFs.
    password: Optional[Password] = None
    # pdftoppm or pdftocairo.
    tool: RenderTool = RenderTool.pdftoppm

    def __post_init__(self) -> None:
        """Coerce shorthand values and reject mistyped fields."""
        resolution = self.resolution
        if isinstance(resolution, int) and not isinstance(resolution, bool):
            resolution = Dpi.uniform(resolution)
        elif isinstance(resolution, tuple) and len(resolution) == 2:
            resolution = Dpi.xy(*resolution)
        if not isinstance(resolution, Dpi):
            raise ConfigValidationError(
                f"resolution={self.resolution!r} must be a Dpi, int, or (x, y) tuple"
            )
        object.__setattr__(self, "resolution", resolution)

        if self.scale is not None and not isinstance(self.scale, Scale):
            raise ConfigValidationError(f"scale={self.scale!r} must be a Scale")
        if not isinstance(self.grayscale, bool):
            raise ConfigValidationError(
                f"grayscale={self.grayscale!r} must be a bool"
            )
        if self.crop is not None and not isinstance(self.crop, Crop):
            raise ConfigValidationError(f"crop={self.crop!r} must be a Crop")
        if self.password is not None and not isinstance(self.password, Password):
            raise ConfigValidationError("password must be a Password")

        if not isinstance(self.tool, RenderTool):
            try:
                object.__setattr__(self, "tool", RenderTool(self.tool))
            except ValueError as exc:
                raise ConfigValidationError(
                    f"tool={self.tool!r} must be one of "
                    f"{[t.value for t in RenderTool]}"
                ) from exc

    @property
    def pdftocairo(self) -> bool:
        return self.tool is RenderTool.pdftocairo

    # ── Plain-dict conversion ──────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RenderConfig":
        """Build a config from JSON-style values.

        Accepted shapes::

            {"resolution": 300}                      # or [300, 200]
            {"scale": 1024}                          # or {"x": 800, "y": 600}
            {"crop": [x, y, width, height]}
            {"password": {"user": "secret"}}         # or {"owner": ...}
            {"grayscale": true, "tool": "pdftocairo"}
        """
        unknown = sorted(set(data) - set(_CONFIG_KEYS))
        if unknown:
            raise ConfigValidationError(f"Unknown render option(s): {unknown}")

        kwargs: Dict[str, Any] = {}
        if "resolution" in data:
            res = data["resolution"]
            kwargs["resolution"] = tuple(res) if isinstance(res, list) else res
        if data.get("scale") is not None:
            kwargs["scale"] = _scale_from_value(data["scale"])
        if "grayscale" in data:
            kwargs["grayscale"] = data["grayscale"]
        if data.get("crop") is not None:
            crop = data["crop"]
            if isinstance(crop, Mapping):
                if set(crop) != {"x", "y", "width", "height"}:
                    raise ConfigValidationError(
                        f"crop keys must be x, y, width, height; got {sorted(crop)}"
                    )
                kwargs["crop"] = Crop(**crop)
            else:
                if len(crop) != 4:
                    raise ConfigValidationError(
                        f"crop={crop!r} must be [x, y, width, height]"
                    )
                kwargs["crop"] = Crop(*crop)
        if data.get("password") is not None:
            kwargs["password"] = _password_from_value(data["password"])
        if "tool" in data:
            kwargs["tool"] = data["tool"]
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the :meth:`from_dict` shape (password redacted)."""
        d: Dict[str, Any] = {
            "resolution": (
                self.resolution.x
                if self.resolution.is_uniform
                else [self.resolution.x, self.resolution.y]
            ),
            "grayscale": self.grayscale,
            "tool": self.tool.value,
        }
        if self.scale is not None:
            d["scale"] = {
                k: v
                for k, v in (
                    ("size", self.scale.size),
                    ("x", self.scale.x),
                    ("y", self.scale.y),
                )
                if v is not None
            }
        if self.crop is not None:
            d["crop"] = list(self.crop.to_tuple())
        if self.password is not None:
            d["password"] = {self.password.kind.value: "***"}
        return d


def _scale_from_value(value: Any) -> Scale:
    if isinstance(value, int) and not isinstance(value, bool):
        return Scale.uniform(value)
    if isinstance(value, Mapping):
        extra = set(value) - {"size", "x", "y"}
        if extra:
            raise ConfigValidationError(f"Unknown scale key(s): {sorted(extra)}")
        return Scale(**value)
    raise ConfigValidationError(f"scale={value!r} must be an int or a mapping")


def _password_from_value(value: Any) -> Password:
    if isinstance(value, Mapping) and len(value) == 1:
        ((kind, secret),) = value.items()
        return Password(kind, secret)
    raise ConfigValidationError(
        "password must be a single-key mapping: {'user': ...} or {'owner': ...}"
    )
