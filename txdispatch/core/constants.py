ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Fragments of node error messages meaning the submitted nonce clashes with
# a transaction the node already knows about.
NONCE_ERROR_PATTERNS = (
    "nonce too low",
    "nonce too high",
    "already known",
    "known transaction",
    "replacement transaction underpriced",
    "invalid nonce",
)

PENDING_BLOCK = "pending"
