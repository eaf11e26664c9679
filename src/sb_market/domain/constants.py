"""Protocol constants for markets. Not configuration: changing any of these
changes settlement results for every market."""

AUTHORITY_FEE_BPS_DEFAULT = 20   # 0.2%
HOST_FEE_BPS_DEFAULT = 670       # 6.7%

TITLE_MAX_LEN = 64               # bytes, UTF-8
LABEL_MAX_LEN = 32               # bytes, UTF-8

# Residue from truncating divisions that close_market may sweep
DUST_MAX_LAMPORTS = 10
