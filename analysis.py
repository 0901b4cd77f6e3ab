"""
Optional LLM analysis of collected metrics

The call goes to Gemini through the google-genai SDK. It is slow and may
fail, so it never runs on the tick path and never raises to its caller:
every failure comes back as one of the sentinel strings below.
"""

import asyncio
import dataclasses
import json
import logging
import os
import threading
from typing import Any, Callable, Dict, Optional, Sequence

from google import genai
from google.genai import types

from models import AttackKind, MetricsRecord

logger = logging.getLogger(__name__)

UNAVAILABLE = "API key not configured. Unable to perform AI analysis."
FAILED = "Failed to generate analysis. Please try again."
EMPTY = "No analysis generated."

PROMPT_TEMPLATE = """
You are a data scientist and cybersecurity expert preparing a dataset to train an ML model
for detecting Wireless Sensor Network (WSN) jamming attacks.

The user is currently simulating a "{attack}" attack.

Here is a sample of the CSV data generated (last {count} records):
Headers: [Timestamp, AttackType, PDR, PLR, Throughput, Latency, Energy, AvgLinkQuality, JammingIntensity]
Data:
{data}

Please provide an analysis for the ML engineer:
1. Feature Importance: which metrics (PDR, Latency, LinkQuality, ...) correlate most strongly with this attack type?
2. Attack Signature: describe the statistical signature of this attack.
3. Threshold Suggestion: what thresholds would a simple heuristic detector use before the ML model is ready?

Keep it concise and focused on helping the user understand the data they are collecting.
"""


def sample_records(records: Sequence[MetricsRecord], size: int) -> Sequence[MetricsRecord]:
    """Most recent ``size`` records"""
    if len(records) > size:
        return records[-size:]
    return records


def _record_dict(r: MetricsRecord) -> Dict[str, Any]:
    d = dataclasses.asdict(r)
    d["attack_kind"] = r.attack_kind.value
    return d


def build_prompt(records: Sequence[MetricsRecord], kind: AttackKind, limit: int) -> str:
    recent = list(records)[-limit:]
    return PROMPT_TEMPLATE.format(
        attack=kind.value,
        count=len(recent),
        data=json.dumps([_record_dict(r) for r in recent]),
    )


def make_client(cfg: Dict[str, Any]) -> Optional[genai.Client]:
    """Gemini client, or None when no API key is set"""
    for name in cfg["analysis_key_env"]:
        key = os.environ.get(name)
        if key:
            return genai.Client(api_key=key)
    return None


async def analyze(records: Sequence[MetricsRecord], kind: AttackKind, cfg: Dict[str, Any],
                  client: Any = None) -> str:
    """Ask the model to describe the attack signature in ``records``"""
    try:
        if client is None:
            client = make_client(cfg)
        if client is None:
            return UNAVAILABLE

        prompt = build_prompt(records, kind, cfg["analysis_prompt_records"])
        response = await client.aio.models.generate_content(
            model=cfg["analysis_model"],
            contents=prompt,
            config=types.GenerateContentConfig(
                thinking_config=types.ThinkingConfig(thinking_budget=0),
            ),
        )
        text = response.text
    except Exception:
        logger.exception("analysis request failed")
        return FAILED
    return text or EMPTY


class AnalysisWorker:
    """Event loop on a daemon thread so analysis never blocks the frame clock"""

    def __init__(self, cfg: Dict[str, Any], client: Any = None):
        self.cfg = cfg
        self.client = client
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def _run(self):
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def submit(self, records: Sequence[MetricsRecord], kind: AttackKind,
               on_done: Callable[[str], None]):
        """Schedule an analysis; ``on_done`` runs on the worker thread"""
        sample = tuple(sample_records(records, self.cfg["analysis_sample"]))
        fut = asyncio.run_coroutine_threadsafe(
            analyze(sample, kind, self.cfg, self.client), self.loop)

        def _finish(f):
            if f.cancelled():
                return
            on_done(f.result())

        fut.add_done_callback(_finish)
        return fut

    def close(self):
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=1.0)
        if not self._thread.is_alive():
            self.loop.close()
