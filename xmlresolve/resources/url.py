from __future__ import annotations

import pathlib
import posixpath
from typing import Any, BinaryIO, Optional
from urllib.parse import urljoin, urlparse
from urllib.request import url2pathname

import boto3
import requests
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import (
    ResourceAccessDeniedError,
    ResourceIOError,
    ResourceNotFoundError,
)
from .base import Resource, translate_os_error

FILE_SCHEME = "file"
HTTP_SCHEMES = frozenset({"http", "https"})
S3_SCHEME = "s3"
URL_SCHEMES = frozenset({FILE_SCHEME, S3_SCHEME}) | HTTP_SCHEMES

_S3_MISSING_CODES = frozenset({"NoSuchKey", "NoSuchBucket", "NotFound", "404"})
_S3_DENIED_CODES = frozenset({"AccessDenied", "Forbidden", "403"})


class UrlResource(Resource):
    """Resource addressed by a URL with an explicit scheme.

    ``file:`` URLs are read from disk, ``http:``/``https:`` through a
    ``requests`` session and ``s3:`` through a boto3 client. Clients are
    created lazily so building the value never touches the network.
    """

    def __init__(
        self,
        url: str,
        *,
        session: Optional[requests.Session] = None,
        s3_client: Any = None,
        timeout: float = 10.0,
    ) -> None:
        parsed = urlparse(url)
        scheme = parsed.scheme.lower()
        if scheme not in URL_SCHEMES:
            raise ValueError(f"Unsupported URL scheme in '{url}'.")
        self._url = url
        self._parsed = parsed
        self._scheme = scheme
        self._session = session
        self._s3_client = s3_client
        self._timeout = timeout

    @property
    def url(self) -> str:
        return self._url

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def description(self) -> str:
        return f"URL [{self._url}]"

    @property
    def filename(self) -> Optional[str]:
        return posixpath.basename(self._parsed.path) or None

    def exists(self) -> bool:
        if self._scheme == FILE_SCHEME:
            return self._file_path().is_file()
        if self._scheme == S3_SCHEME:
            bucket, key = self._s3_location()
            try:
                self._s3().head_object(Bucket=bucket, Key=key)
            except (ClientError, BotoCoreError, ResourceIOError):
                return False
            return True
        try:
            response = self._http().head(self._url, timeout=self._timeout, allow_redirects=True)
        except requests.RequestException:
            return False
        try:
            return response.status_code < 400
        finally:
            response.close()

    def open(self) -> BinaryIO:
        if self._scheme == FILE_SCHEME:
            try:
                return self._file_path().open("rb")
            except OSError as exc:
                raise translate_os_error(exc, self.description) from exc
        if self._scheme == S3_SCHEME:
            return self._open_s3()
        return self._open_http()

    def create_relative(self, relative_path: str) -> "UrlResource":
        if self._scheme == S3_SCHEME:
            path = posixpath.join(posixpath.dirname(self._parsed.path), relative_path)
            url = f"s3://{self._parsed.netloc}{path}"
        else:
            url = urljoin(self._url, relative_path)
        return UrlResource(url, session=self._session, s3_client=self._s3_client, timeout=self._timeout)

    # --- scheme helpers ---------------------------------------------------------------

    def _file_path(self) -> pathlib.Path:
        return pathlib.Path(url2pathname(self._parsed.path))

    def _http(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session

    def _open_http(self) -> BinaryIO:
        try:
            response = self._http().get(self._url, timeout=self._timeout, stream=True)
        except requests.RequestException as exc:
            raise ResourceIOError(f"Failed to fetch {self.description}: {exc}", self.description) from exc

        status = response.status_code
        if status >= 400:
            response.close()
            if status in (404, 410):
                raise ResourceNotFoundError(
                    f"{self.description} cannot be opened because it does not exist.",
                    self.description,
                )
            if status in (401, 403):
                raise ResourceAccessDeniedError(
                    f"Access to {self.description} was denied (HTTP {status}).",
                    self.description,
                )
            raise ResourceIOError(f"Failed to fetch {self.description}: HTTP {status}", self.description)

        response.raw.decode_content = True
        return response.raw

    def _s3(self) -> Any:
        if self._s3_client is None:
            try:
                self._s3_client = boto3.client("s3")
            except BotoCoreError as exc:
                raise ResourceIOError(
                    f"Unable to create an S3 client for {self.description}.", self.description
                ) from exc
        return self._s3_client

    def _s3_location(self):
        bucket = self._parsed.netloc
        key = self._parsed.path.lstrip("/")
        if not bucket or not key:
            raise ResourceIOError(f"Invalid S3 URI '{self._url}'.", self.description)
        return bucket, key

    def _open_s3(self) -> BinaryIO:
        bucket, key = self._s3_location()
        try:
            response = self._s3().get_object(Bucket=bucket, Key=key)
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", ""))
            if code in _S3_MISSING_CODES:
                raise ResourceNotFoundError(
                    f"{self.description} cannot be opened because it does not exist.",
                    self.description,
                ) from exc
            if code in _S3_DENIED_CODES:
                raise ResourceAccessDeniedError(f"Access to {self.description} was denied.", self.description) from exc
            raise ResourceIOError(f"Failed to fetch {self.description} from S3.", self.description) from exc
        except BotoCoreError as exc:  # pragma: no cover - network error cases
            raise ResourceIOError(f"Failed to fetch {self.description} from S3.", self.description) from exc
        return response["Body"]

    def __eq__(self, other: object) -> bool:
        return isinstance(other, UrlResource) and other._url == self._url

    def __hash__(self) -> int:
        return hash(self._url)
