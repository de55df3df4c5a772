from . import ai, bags, health, nfts, payments, programs, rpc, tokens, transactions, workflows

__all__ = ["ai", "bags", "health", "nfts", "payments", "programs", "rpc", "tokens", "transactions", "workflows"]
