"""
Staking examples that sign with a Fireblocks vault and build transactions
through the Blockdaemon staking API.
"""

__version__ = "0.1.0"
