"""
Transforms — Payload rewrites that bridge vocabulary drift between instances.

Rules run in two stages:

  pre_conversion   over the EAD XML, before it is sent to the converter
  post_conversion  over the converted JSON, before it is imported

Within a stage, rules run in the order they were registered. New rules are
added with `register()`; the orchestrator only ever calls `apply()`.
"""

import re
from typing import Callable, Dict, List

Rule = Callable[[str], str]

PRE_CONVERSION = "pre_conversion"
POST_CONVERSION = "post_conversion"
STAGES = (PRE_CONVERSION, POST_CONVERSION)

_PUBLISH_FALSE = re.compile(r'"publish"\s*:\s*false')


def normalize_otherlevel(payload: str) -> str:
    """EAD level attribute: "other level" -> "otherlevel"."""
    return payload.replace('level="other level"', 'level="otherlevel"')


def force_publish(payload: str) -> str:
    """Converted records must be published to be visible after import."""
    return _PUBLISH_FALSE.sub('"publish":true', payload)


class TransformationPipeline:
    """Ordered rewrite rules per payload stage."""

    def __init__(self):
        self._rules: Dict[str, List[Rule]] = {stage: [] for stage in STAGES}

    def register(self, stage: str, rule: Rule) -> "TransformationPipeline":
        self._check_stage(stage)
        self._rules[stage].append(rule)
        return self

    def rules(self, stage: str) -> List[Rule]:
        self._check_stage(stage)
        return list(self._rules[stage])

    def apply(self, payload: str, stage: str) -> str:
        for rule in self.rules(stage):
            payload = rule(payload)
        return payload

    @staticmethod
    def _check_stage(stage: str) -> None:
        if stage not in STAGES:
            raise ValueError(f"Unknown transformation stage '{stage}'")


def default_pipeline() -> TransformationPipeline:
    pipeline = TransformationPipeline()
    pipeline.register(PRE_CONVERSION, normalize_otherlevel)
    pipeline.register(POST_CONVERSION, force_publish)
    return pipeline
