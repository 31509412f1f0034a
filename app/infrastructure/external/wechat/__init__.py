"""WeChat official-account web authorization (OAuth 2.0 code flow)."""

from app.infrastructure.external.wechat.oauth_client import WeChatOAuthClient

__all__ = ["WeChatOAuthClient"]
