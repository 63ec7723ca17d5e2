from typing import Annotated

from pydantic import AfterValidator, Field


def check_image_name(name: str) -> str:
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem or not ext:
        raise ValueError(f"image name {name!r} has no extension")
    return name


# File name a client wants to upload; the signer turns it into a storage key
ImageName = Annotated[str, Field(min_length=1, max_length=100), AfterValidator(check_image_name)]
