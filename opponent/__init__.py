"""
opponent package – Adaptive opponent for the pattern memory duel.

Modules:
    memory_opponent      – MemoryOpponent facade that owns the state and sub-systems
    opponent_state       – OpponentState record, tiers, personalities, adaptive factors
    recall_simulator     – Noisy pattern reproduction from layered effective accuracy
    outcome_recorder     – Mistake / success bookkeeping after each player round
    difficulty_adjuster  – Between-round recalibration (self-adjusting tier)
    challenge_composer   – Patterns aimed at the player's weak cells and structures
    pattern_traits       – Sequential / clustered pattern classification
    persistence          – JSON save / load of OpponentState
    insights             – Text report and learning-curve chart
    simulation_runner    – Headless opponent-vs-stand-in matches
"""
