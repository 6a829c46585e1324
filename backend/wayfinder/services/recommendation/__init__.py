"""Recommendation engine — rule-based venue ranking.

Modules:
    config            Weights, limits and price estimates
    budget_tracker    Remaining budget, affordability and immutable commits
    scoring_engine    Composite fit score for one candidate
    ranking_pipeline  Category/budget filtering, scoring, ordering, top-N
    cost_estimator    Price-level based cost estimates for unpriced venues
    candidate_source  Read interface onto the venue repository

Pipeline:
    CandidateSource → BudgetTracker filter → ScoringEngine → RankingPipeline sort/truncate
"""
