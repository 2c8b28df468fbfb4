# config.py



# ─── Cipher ────────────────────────────────────────────────────────────────────

# 80-bit master key; the five 16-bit round keys are sliced from it, MSB first.
MASTER_KEY = 0x1234_5678_90AB_CDEF_1234
NUM_ROUND_KEYS = 5

# Block used for the encrypt/decrypt sanity check
SAMPLE_PLAINTEXT = 0xABCD


# ─── Pair Generation ───────────────────────────────────────────────────────────

# If False, plaintexts are 0, 1, 2, ...
# Otherwise they are drawn uniformly at random with GLOBAL_RANDOM_SEED.
USE_RANDOM_PLAINTEXTS = False
GLOBAL_RANDOM_SEED = 12345

SHOW_PROGRESS = True


# ─── Linear Attack ─────────────────────────────────────────────────────────────

LINEAR_NUM_PAIRS = 10000

# Plaintext mask and mask on the state before the last S-box layer
# (already shifted to the target nibble). This pair is a 3-round linear
# characteristic with |bias| ~ 0.034 for MASTER_KEY.
LINEAR_ALPHA = 0x00E0
LINEAR_BETA = 0x0040
LINEAR_TARGET_NIBBLE = 1


# ─── Differential Attack ───────────────────────────────────────────────────────

DIFF_NUM_PAIRS = 5000

# Input difference and expected difference before the last S-box layer
# (already shifted to the target nibble), probability ~ 0.14 for MASTER_KEY.
DIFF_DELTA_P = 0x0700
DIFF_DELTA_U = 0x0005
DIFF_TARGET_NIBBLE = 0


# ─── Misc ──────────────────────────────────────────────────────────────────────

# Threads used to count key candidates; 1 runs single-threaded.
NUM_WORKERS = 1

# Set to None to skip writing results / plots.
RESULTS_FILE = "results.json"
PLOT_DIR = "plots"
