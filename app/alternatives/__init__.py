"""
Exercise alternatives pipeline.

Candidate filtering, rule-based scoring, optional generative re-ranking,
result caching and usage metering.  :class:`~app.alternatives.pipeline.AlternativesPipeline`
wires the stages together.
"""
