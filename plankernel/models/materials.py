"""Material catalogue models."""

from __future__ import annotations
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class CrossSection(BaseModel):
    """Stock cross section of a dimensional material (mm)."""
    smaller_length: float
    bigger_length: float


class SheetSize(BaseModel):
    """Stock sheet face size (mm)."""
    smaller_length: float
    bigger_length: float


class _MaterialBase(BaseModel):
    id: str
    name: str
    color: str = "#999999"


class DimensionalMaterial(_MaterialBase):
    """Sawn timber and similar: bought by cross section and length."""
    type: Literal["dimensional"] = "dimensional"
    cross_sections: list[CrossSection] = []
    lengths: list[float] = []


class SheetMaterial(_MaterialBase):
    type: Literal["sheet"] = "sheet"
    thicknesses: list[float] = []
    sizes: list[SheetSize] = []


class VolumeMaterial(_MaterialBase):
    type: Literal["volume"] = "volume"


class StrawbaleMaterial(_MaterialBase):
    type: Literal["strawbale"] = "strawbale"
    bale_length: float = 800
    bale_width: float = 360
    bale_height: float = 500


class GenericMaterial(_MaterialBase):
    type: Literal["generic"] = "generic"


Material = Annotated[
    Union[DimensionalMaterial, SheetMaterial, VolumeMaterial, StrawbaleMaterial, GenericMaterial],
    Field(discriminator="type"),
]


DEFAULT_MATERIALS: dict[str, Material] = {
    m.id: m
    for m in [
        DimensionalMaterial(
            id="wood",
            name="Construction timber",
            color="#c4a27a",
            cross_sections=[
                CrossSection(smaller_length=60, bigger_length=120),
                CrossSection(smaller_length=60, bigger_length=360),
                CrossSection(smaller_length=120, bigger_length=360),
            ],
            lengths=[5000],
        ),
        StrawbaleMaterial(id="straw", name="Straw bales", color="#e6c65a"),
        SheetMaterial(
            id="osb",
            name="OSB",
            color="#b8905c",
            thicknesses=[15, 18, 22],
            sizes=[SheetSize(smaller_length=1250, bigger_length=2500)],
        ),
        VolumeMaterial(id="clay", name="Clay plaster", color="#a0785a"),
        GenericMaterial(id="masonry", name="Masonry", color="#8c8c8c"),
    ]
}
