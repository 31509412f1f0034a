"""WeChat web authorization client: authorize URL and code-for-openid exchange.

See the official-account web authorization docs: step 1 redirects the
browser to open.weixin.qq.com with our callback, step 2 exchanges the
returned code for an access token that carries the user's openid.
"""

from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from app.application.dtos.auth import WeChatAccessToken
from app.core.config import Settings
from app.domain.exceptions import UpstreamServiceException
from app.shared.telemetry.logging import get_logger
from app.shared.telemetry.telemetry import get_tracer
from app.shared.utils.sanitization import mask_identifier

logger = get_logger(__name__)
tracer = get_tracer(__name__)

_DEFAULT_EXPIRES_IN = 7200


class WeChatOAuthClient:
    """Builds authorize URLs and exchanges codes against the WeChat API."""

    def __init__(
        self,
        settings: Settings,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not settings.wx_app_id or settings.wx_app_secret is None:
            raise ValueError("WeChat client requires WX_APP_ID and WX_APP_SECRET")
        self._app_id = settings.wx_app_id
        self._app_secret = settings.wx_app_secret
        self._authorize_url = settings.wx_authorize_url
        self._access_token_url = settings.wx_access_token_url
        self._scope = settings.wx_scope
        self._timeout = settings.http_timeout_seconds
        self._shared_http = http_client

    @asynccontextmanager
    async def _http_cm(self):
        """Yield shared HTTP client or a short-lived one."""
        if self._shared_http is not None:
            yield self._shared_http
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client

    def build_authorize_url(self, redirect_uri: str) -> str:
        """Return the authorize URL; WeChat requires this parameter order and fragment."""
        params = {
            "appid": self._app_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": self._scope,
        }
        query = urlencode(params, quote_via=quote, safe="")
        return f"{self._authorize_url}?{query}#wechat_redirect"

    async def exchange_code(self, code: str) -> WeChatAccessToken:
        """Exchange an authorization code for the user's openid.

        Raises:
            UpstreamServiceException: Transport failure, non-200 status,
                unparseable body, an errcode in the body, or no openid.
        """
        params = {
            "appid": self._app_id,
            "secret": self._app_secret.get_secret_value(),
            "code": code,
            "grant_type": "authorization_code",
        }
        with tracer.start_as_current_span("wechat.exchange_code"):
            try:
                async with self._http_cm() as client:
                    response = await client.get(
                        self._access_token_url, params=params, timeout=self._timeout
                    )
            except httpx.HTTPError as e:
                logger.error("WeChat token exchange transport error: %s", type(e).__name__)
                raise UpstreamServiceException(
                    "wechat", "WeChat token exchange failed"
                ) from e
        if response.status_code != 200:
            logger.error("WeChat token exchange failed: status=%d", response.status_code)
            raise UpstreamServiceException("wechat", "WeChat token exchange failed")
        try:
            data: Any = response.json()
        except ValueError as e:
            raise UpstreamServiceException("wechat", "WeChat returned an invalid response") from e
        if not data or not isinstance(data, dict):
            raise UpstreamServiceException("wechat", "WeChat returned an empty response")
        if data.get("errcode") not in (None, 0):
            logger.warning(
                "WeChat token exchange error: errcode=%s errmsg=%s",
                data.get("errcode"),
                data.get("errmsg"),
            )
            raise UpstreamServiceException("wechat", "WeChat returned an error")
        open_id = data.get("openid")
        if not open_id or not isinstance(open_id, str):
            raise UpstreamServiceException("wechat", "WeChat returned no openid")
        try:
            expires_in = int(data.get("expires_in") or _DEFAULT_EXPIRES_IN)
        except (TypeError, ValueError):
            expires_in = _DEFAULT_EXPIRES_IN
        logger.info("WeChat code exchanged for openid %s", mask_identifier(open_id))
        return WeChatAccessToken(
            open_id=open_id,
            access_token=str(data.get("access_token") or ""),
            expires_in=expires_in,
            refresh_token=data.get("refresh_token"),
            scope=data.get("scope"),
            raw=data,
        )
