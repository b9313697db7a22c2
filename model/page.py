from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from core.utils import slugify


class PageBase(BaseModel):
    title: str
    about: str

    @field_validator("title", "about")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @property
    def slug(self) -> str:
        return slugify(self.title)


class NationPage(PageBase):
    type: Literal["nation"] = "nation"
    # Trusted HTML fragment, rendered verbatim
    techtree: str = ""


class AircraftPage(PageBase):
    type: Literal["aircraft"] = "aircraft"
    playstyle: str = ""
    proscons: str = ""
    trivia: str = ""
    loadout_img: str = ""


Page = Annotated[Union[NationPage, AircraftPage], Field(discriminator="type")]

_page_adapter = TypeAdapter(Page)


def parse_page(data: dict) -> Union[NationPage, AircraftPage]:
    """Build the page variant selected by data["type"]"""
    return _page_adapter.validate_python(data)
