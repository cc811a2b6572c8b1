"""
Inventory Analysis Service

Optional AI summary of the current stock position.  Given the item list and
recent transactions it asks a text-generation model for a short Indonesian
summary: critical items, movement trend, and recommended actions.

Entirely decoupled from ledger correctness: it never raises into the caller.
A missing credential yields a fixed "unavailable" message, a disabled
feature yields the same fallback, and API failures are logged and turned
into an apology string.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from openai import OpenAI

from stock_config.schema import AnalysisSettings
from stock_kernel.domain.models import Item, Transaction
from stock_kernel.logging_config import get_logger

logger = get_logger("services.analysis")

UNAVAILABLE_MESSAGE = (
    "API Key tidak ditemukan. Mohon konfigurasi API_KEY untuk menggunakan fitur AI."
)
EMPTY_RESPONSE_MESSAGE = "Tidak ada respon dari AI."
FAILURE_MESSAGE = "Maaf, terjadi kesalahan saat menganalisis data inventaris."

SYSTEM_PROMPT = (
    "Anda adalah asisten ahli manajemen gudang. Analisis data inventaris "
    "berikut ini dan berikan ringkasan singkat dalam Bahasa Indonesia."
)


@dataclass(frozen=True)
class AnalysisResult:
    content: str
    source: str  # "ai" or "fallback"
    fallback_used: bool = False
    model: str | None = None
    error: str | None = None


def build_prompt(
    items: Sequence[Item],
    transactions: Sequence[Transaction],
    recent_limit: int = 10,
) -> str:
    """User prompt listing stock levels and the most recent movements."""
    inventory_lines = "\n".join(
        f"- {i.name} (SKU: {i.sku}): Stok {i.stock} {i.unit} (Min: {i.min_stock})"
        for i in items
    )
    transaction_lines = "\n".join(
        f"- {t.date.date().isoformat()}: {t.kind.value} {t.quantity} {t.item_name}"
        for t in transactions[:recent_limit]
    )
    return (
        "Data Stok Saat Ini:\n"
        f"{inventory_lines}\n\n"
        "Transaksi Terakhir:\n"
        f"{transaction_lines}\n\n"
        "Tolong berikan:\n"
        "1. Identifikasi barang yang stoknya kritis (di bawah minimum).\n"
        "2. Analisis singkat tren pergerakan barang.\n"
        "3. Rekomendasi tindakan (misal: restock segera, atau kurangi stok mati).\n\n"
        "Gunakan format markdown bullet points. Jaga agar tetap ringkas."
    )


class InventoryAnalysisService:
    """AI inventory summary with fixed-message fallbacks."""

    def __init__(
        self,
        settings: AnalysisSettings | None = None,
        client: Any | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.settings = settings or AnalysisSettings()
        self._client = client
        self._environ = environ

    def _get_client(self) -> Any | None:
        """Lazily build the OpenAI client; None without a credential."""
        if self._client is None:
            api_key = self.settings.api_key(self._environ)
            if api_key is None:
                return None
            self._client = OpenAI(api_key=api_key)
        return self._client

    def analyze(self, items: Sequence[Item], transactions: Sequence[Transaction]) -> AnalysisResult:
        if not self.settings.enabled:
            logger.debug("analysis_disabled")
            return AnalysisResult(
                content=UNAVAILABLE_MESSAGE,
                source="fallback",
                fallback_used=True,
                error="AI analysis disabled",
            )

        client = self._get_client()
        if client is None:
            logger.warning(
                "analysis_credential_missing",
                extra={"api_key_env": self.settings.api_key_env},
            )
            return AnalysisResult(
                content=UNAVAILABLE_MESSAGE,
                source="fallback",
                fallback_used=True,
                error="API key not configured",
            )

        prompt = build_prompt(items, transactions, self.settings.recent_transaction_limit)
        try:
            response = client.chat.completions.create(
                model=self.settings.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=self.settings.max_tokens,
                temperature=self.settings.temperature,
            )
            content = (response.choices[0].message.content or "").strip()
        except Exception as e:
            logger.error("analysis_request_failed", extra={"error": str(e), "model": self.settings.model})
            return AnalysisResult(
                content=FAILURE_MESSAGE,
                source="fallback",
                fallback_used=True,
                model=self.settings.model,
                error=str(e),
            )

        if not content:
            return AnalysisResult(
                content=EMPTY_RESPONSE_MESSAGE,
                source="ai",
                model=self.settings.model,
            )
        return AnalysisResult(content=content, source="ai", model=self.settings.model)
