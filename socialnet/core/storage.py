import time
import uuid
from urllib.parse import urlencode

import cloudinary
import cloudinary.utils
from pydantic import BaseModel

from socialnet.core import config

cloudinary.config(
    cloud_name=config.CLOUDINARY_CLOUD_NAME,
    api_key=config.CLOUDINARY_API_KEY,
    api_secret=config.CLOUDINARY_API_SECRET,
    secure=True,
)


class SignedUrl(BaseModel):
    url: str
    key: str


def split_image_name(name: str):
    public_id, dot, ext = name.rpartition(".")
    if not dot or not public_id or not ext:
        raise ValueError(f"Invalid file name: {name}")
    return public_id, ext


class CloudinarySigner:
    """Issues time-limited cloudinary urls for stored images.

    Keys are ``<folder>/<uuid>_<original name>``; downloads go through the
    authenticated delivery type so a url stops working once it expires.
    """

    def __init__(self, folder: str = config.IMAGE_FOLDER, lifetime: int = config.PRE_SIGNED_URL_LIFETIME):
        self.folder = folder
        self.lifetime = lifetime

    def _expires_at(self) -> int:
        return int(time.time()) + self.lifetime

    async def sign(self, key: str) -> SignedUrl:
        public_id, ext = split_image_name(key)
        url = cloudinary.utils.private_download_url(
            public_id,
            ext,
            resource_type="image",
            type="authenticated",
            expires_at=self._expires_at(),
        )
        return SignedUrl(url=url, key=key)

    async def sign_upload(self, name: str) -> SignedUrl:
        split_image_name(name)
        key = f"{self.folder}/{uuid.uuid4()}_{name}"
        public_id, _ = split_image_name(key)
        params = {"public_id": public_id, "timestamp": int(time.time()), "type": "authenticated"}
        params["signature"] = cloudinary.utils.api_sign_request(params, cloudinary.config().api_secret)
        params["api_key"] = cloudinary.config().api_key
        url = cloudinary.utils.cloudinary_api_url("upload", resource_type="image") + "?" + urlencode(params)
        return SignedUrl(url=url, key=key)


signer = CloudinarySigner()


def get_signer() -> CloudinarySigner:
    return signer
