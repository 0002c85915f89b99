"""Review — verdicts for agent branches."""

from revchain.review.models import Verdict
from revchain.review.pipeline import ReviewPipeline
from revchain.review.prompts import build_review_prompt

__all__ = ["ReviewPipeline", "Verdict", "build_review_prompt"]
