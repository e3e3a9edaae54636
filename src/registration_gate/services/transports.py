"""Out-of-band delivery of one-time codes.

Each transport exposes ``async send(destination, code) -> bool``. Returning
False means the provider refused the message; transports also return False
rather than raising for network and protocol failures, after logging them.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Protocol

import httpx

from registration_gate.core.settings import Settings, settings

# Configure logger for this module
logger = logging.getLogger(__name__)

HTTP_OK = 200
SMTP_SSL_PORT = 465


class OtpTransport(Protocol):
    """Anything able to deliver a code to one destination."""

    async def send(self, destination: str, code: str) -> bool: ...


def mask_destination(destination: str) -> str:
    """Return a log-safe form of an email address or phone number."""
    if "@" in destination:
        local, _, domain = destination.partition("@")
        return f"{local[:1]}***@{domain}"
    return f"***{destination[-4:]}"


@dataclass(frozen=True)
class SmtpConfig:
    """Immutable configuration for the SMTP transport."""

    host: str | None
    port: int
    user: str | None
    password: str | None
    sender: str | None
    sender_name: str
    ttl_minutes: int
    timeout_seconds: float

    @classmethod
    def from_settings(cls, cfg: Settings) -> SmtpConfig:
        return cls(
            host=cfg.smtp_host,
            port=cfg.smtp_port,
            user=cfg.smtp_user,
            password=cfg.smtp_password,
            sender=cfg.email_from or cfg.smtp_user,
            sender_name=cfg.email_from_name,
            ttl_minutes=max(1, cfg.otp_ttl_seconds // 60),
            timeout_seconds=cfg.smtp_timeout_seconds,
        )

    @property
    def complete(self) -> bool:
        return all([self.host, self.port, self.user, self.password, self.sender])


class SmtpEmailTransport:
    """Send codes by email through an authenticated SMTP relay."""

    def __init__(self, config: SmtpConfig | None = None) -> None:
        self._config = config or SmtpConfig.from_settings(settings)

    def _build_message(self, address: str, code: str) -> EmailMessage:
        cfg = self._config
        msg = EmailMessage()
        msg["From"] = f"{cfg.sender_name} <{cfg.sender}>"
        msg["To"] = address
        msg["Subject"] = "Your OTP for Registration"
        msg.set_content(f"Your OTP is {code}. It is valid for {cfg.ttl_minutes} minutes.")
        msg.add_alternative(
            f"<b>Your OTP is {code}</b>. It is valid for {cfg.ttl_minutes} minutes.",
            subtype="html",
        )
        return msg

    def _deliver(self, msg: EmailMessage) -> None:
        cfg = self._config
        context = ssl.create_default_context()
        if cfg.port == SMTP_SSL_PORT:
            with smtplib.SMTP_SSL(
                cfg.host, cfg.port, context=context, timeout=cfg.timeout_seconds
            ) as server:
                server.login(cfg.user, cfg.password)
                server.send_message(msg)
        else:
            with smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout_seconds) as server:
                server.starttls(context=context)
                server.login(cfg.user, cfg.password)
                server.send_message(msg)

    async def send(self, destination: str, code: str) -> bool:
        if not self._config.complete:
            logger.error("SMTP configuration missing; cannot email %s", mask_destination(destination))
            return False
        msg = self._build_message(destination, code)
        try:
            await asyncio.to_thread(self._deliver, msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Email delivery to %s failed: %s", mask_destination(destination), exc)
            return False
        logger.info("Email OTP delivered to %s", mask_destination(destination))
        return True


class HttpSmsTransport:
    """Send codes through a Fast2SMS-style HTTP gateway."""

    def __init__(
        self,
        *,
        gateway_url: str | None = None,
        api_key: str | None = None,
        sender_name: str | None = None,
        timeout_seconds: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._gateway_url = gateway_url or settings.sms_gateway_url
        self._api_key = api_key if api_key is not None else settings.sms_api_key
        self._sender_name = sender_name or settings.sms_sender_name
        self._timeout = timeout_seconds or settings.sms_http_timeout_seconds
        self._client = client

    async def send(self, destination: str, code: str) -> bool:
        if not self._api_key:
            logger.error("SMS API key missing; cannot text %s", mask_destination(destination))
            return False
        params = {
            "authorization": self._api_key,
            "message": f"Your {self._sender_name} OTP is {code}",
            "language": "english",
            "route": "q",
            "numbers": destination.lstrip("+"),
        }
        try:
            if self._client is not None:
                response = await self._client.get(self._gateway_url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(self._gateway_url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("SMS gateway request for %s failed: %s", mask_destination(destination), exc)
            return False

        if response.status_code != HTTP_OK:
            logger.warning(
                "SMS gateway returned %s for %s", response.status_code, mask_destination(destination)
            )
            return False
        try:
            accepted = bool(response.json().get("return"))
        except ValueError:
            logger.warning("SMS gateway returned a non-JSON body")
            return False
        if accepted:
            logger.info("SMS OTP delivered to %s", mask_destination(destination))
        else:
            logger.warning("SMS gateway rejected message for %s", mask_destination(destination))
        return accepted


class EchoTransport:
    """Write codes to the operator log instead of delivering them.

    Used for local and staging operation.
    """

    def __init__(self, channel: str) -> None:
        self.channel = channel

    async def send(self, destination: str, code: str) -> bool:
        logger.info("DEV %s OTP (%s): %s", self.channel.upper(), destination, code)
        return True


@dataclass(frozen=True)
class TransportSet:
    """Transports used by the issuer, one per channel."""

    email: OtpTransport
    mobile: OtpTransport
    echo: bool = False


def build_transports(cfg: Settings | None = None) -> TransportSet:
    """Return transports matching the configured delivery mode."""
    cfg = cfg or settings
    if cfg.effective_delivery_mode == "echo":
        return TransportSet(email=EchoTransport("email"), mobile=EchoTransport("mobile"), echo=True)
    return TransportSet(
        email=SmtpEmailTransport(SmtpConfig.from_settings(cfg)),
        mobile=HttpSmsTransport(
            gateway_url=cfg.sms_gateway_url,
            api_key=cfg.sms_api_key,
            sender_name=cfg.sms_sender_name,
            timeout_seconds=cfg.sms_http_timeout_seconds,
        ),
    )
