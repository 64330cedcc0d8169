from __future__ import annotations

import http.client
import logging
import urllib.error
import urllib.request
from typing import Any, Callable, Protocol
from xml.etree import ElementTree
from xml.sax.saxutils import escape

from playerclaim.core.errors import ProviderUnavailableError

logger = logging.getLogger(__name__)

KPS_NAMESPACE = "http://tckimlik.nvi.gov.tr/WS"
KPS_SOAP_ACTION = f"{KPS_NAMESPACE}/TCKimlikNoDogrula"

_ENVELOPE_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">
  <soap:Body>
    <TCKimlikNoDogrula xmlns="{namespace}">
      <TCKimlikNo>{national_id}</TCKimlikNo>
      <Ad>{first_name}</Ad>
      <Soyad>{last_name}</Soyad>
      <DogumYili>{birth_year}</DogumYili>
    </TCKimlikNoDogrula>
  </soap:Body>
</soap:Envelope>"""


class VerificationProvider(Protocol):
    """External identity authority.

    Returns the authority's boolean answer; raises ProviderUnavailableError
    when no answer could be obtained.
    """

    def verify(self, national_id: str, first_name: str, last_name: str, birth_year: int) -> bool:
        ...


class KpsVerificationClient:
    """SOAP 1.1 client for the KPS public identity check (TCKimlikNoDogrula)."""

    def __init__(
        self,
        endpoint: str,
        timeout_seconds: float = 10.0,
        urlopen: Callable[..., Any] = urllib.request.urlopen,
    ) -> None:
        self.endpoint = endpoint
        self.timeout_seconds = timeout_seconds
        self._urlopen = urlopen

    def verify(self, national_id: str, first_name: str, last_name: str, birth_year: int) -> bool:
        body = build_envelope(national_id, first_name, last_name, birth_year)
        request = urllib.request.Request(
            self.endpoint,
            data=body.encode("utf-8"),
            headers={
                "Content-Type": "text/xml; charset=utf-8",
                "SOAPAction": f'"{KPS_SOAP_ACTION}"',
            },
            method="POST",
        )
        try:
            with self._urlopen(request, timeout=self.timeout_seconds) as response:
                payload = response.read().decode("utf-8", errors="replace")
        except TimeoutError as exc:
            raise ProviderUnavailableError(
                f"Identity authority did not answer within {self.timeout_seconds}s"
            ) from exc
        except urllib.error.HTTPError as exc:
            raise ProviderUnavailableError(f"Identity authority returned HTTP {exc.code}") from exc
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            raise ProviderUnavailableError(f"Identity authority request failed: {exc}") from exc

        logger.debug("KPS answered for birth year %s", birth_year)
        return parse_result(payload)


def build_envelope(national_id: str, first_name: str, last_name: str, birth_year: int) -> str:
    return _ENVELOPE_TEMPLATE.format(
        namespace=KPS_NAMESPACE,
        national_id=escape(national_id),
        first_name=escape(first_name.upper()),
        last_name=escape(last_name.upper()),
        birth_year=int(birth_year),
    )


def parse_result(payload: str) -> bool:
    try:
        root = ElementTree.fromstring(payload)
    except ElementTree.ParseError as exc:
        raise ProviderUnavailableError("Identity authority returned malformed XML") from exc

    node = root.find(f".//{{{KPS_NAMESPACE}}}TCKimlikNoDogrulaResult")
    if node is None or node.text is None:
        raise ProviderUnavailableError("Identity authority response has no result element")

    value = node.text.strip().lower()
    if value == "true":
        return True
    if value == "false":
        return False
    raise ProviderUnavailableError(f"Unexpected identity authority result: {node.text!r}")
