"""
Numeric tolerances shared by the settlement engine.
"""

# Balances within this band of zero are treated as settled (minor-unit scale).
SETTLEMENT_TOLERANCE = 0.01

# Relative bound on accumulated floating error when checking that balances sum to zero.
CONSERVATION_TOLERANCE = 1e-9

# Member status labels used in summaries
STATUS_CREDITOR = "creditor"
STATUS_DEBTOR = "debtor"
STATUS_SETTLED = "settled"
