"""
Pneuma - On-chain interaction layer for BuddyEvents.

Provides the JSON-RPC gateway, ERC-20 calldata encoding, unit conversion
and transaction signing for MON and USDC transfers on Monad.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
