import json
import os

import config
from src.analysis import (
    find_best_differential,
    find_best_linear_approximation,
    linear_approximation_table,
    difference_distribution_table,
    required_pairs,
    success_probability,
)
from src.differential_attack import differential_candidate_counts
from src.linear_attack import best_linear_candidate, candidate_biases, linear_candidate_counts
from src.plots import plot_candidate_scores, plot_table
from src.spn import decrypt, encrypt, expand_key
from src.utils import (
    generate_differential_pairs,
    generate_linear_pairs,
    get_nibble,
    pairs_to_array,
    to_hex,
)


def run_linear_attack(round_keys):
    print(f"\nLinear attack: alpha={to_hex(config.LINEAR_ALPHA)}, beta={to_hex(config.LINEAR_BETA)}, "
          f"target nibble {config.LINEAR_TARGET_NIBBLE}, {config.LINEAR_NUM_PAIRS} pairs")
    pairs = generate_linear_pairs(
        round_keys,
        config.LINEAR_NUM_PAIRS,
        random=config.USE_RANDOM_PLAINTEXTS,
        seed=config.GLOBAL_RANDOM_SEED,
        progress=config.SHOW_PROGRESS
    )
    data = pairs_to_array(pairs, 2)
    counts = linear_candidate_counts(
        data, config.LINEAR_ALPHA, config.LINEAR_BETA, config.LINEAR_TARGET_NIBBLE,
        workers=config.NUM_WORKERS
    )
    biases = candidate_biases(counts, len(data))
    recovered = best_linear_candidate(counts, len(data))
    actual = get_nibble(round_keys[-1], config.LINEAR_TARGET_NIBBLE)

    print(f"Recovered key nibble {config.LINEAR_TARGET_NIBBLE}: {recovered:X} "
          f"(bias {biases[recovered]:+.4f})")
    print(f"Actual key nibble {config.LINEAR_TARGET_NIBBLE}:    {actual:X}")
    return {
        "alpha": to_hex(config.LINEAR_ALPHA),
        "beta": to_hex(config.LINEAR_BETA),
        "target_nibble": config.LINEAR_TARGET_NIBBLE,
        "num_pairs": len(data),
        "counts": counts.tolist(),
        "recovered": recovered,
        "actual": actual,
        "success": recovered == actual,
    }, abs(biases)


def run_differential_attack(round_keys):
    print(f"\nDifferential attack: delta_p={to_hex(config.DIFF_DELTA_P)}, "
          f"delta_u={to_hex(config.DIFF_DELTA_U)}, target nibble {config.DIFF_TARGET_NIBBLE}, "
          f"{config.DIFF_NUM_PAIRS} pairs")
    quads = generate_differential_pairs(
        round_keys,
        config.DIFF_NUM_PAIRS,
        config.DIFF_DELTA_P,
        random=config.USE_RANDOM_PLAINTEXTS,
        seed=config.GLOBAL_RANDOM_SEED,
        progress=config.SHOW_PROGRESS
    )
    counts, num_right = differential_candidate_counts(
        quads, config.DIFF_DELTA_P, config.DIFF_DELTA_U, config.DIFF_TARGET_NIBBLE,
        workers=config.NUM_WORKERS
    )
    recovered = int(counts.argmax())
    actual = get_nibble(round_keys[-1], config.DIFF_TARGET_NIBBLE)

    print(f"Recovered key nibble {config.DIFF_TARGET_NIBBLE}: {recovered:X} "
          f"({counts[recovered]} of {num_right} right pairs)")
    print(f"Actual key nibble {config.DIFF_TARGET_NIBBLE}:    {actual:X}")
    return {
        "delta_p": to_hex(config.DIFF_DELTA_P),
        "delta_u": to_hex(config.DIFF_DELTA_U),
        "target_nibble": config.DIFF_TARGET_NIBBLE,
        "num_right_pairs": num_right,
        "counts": counts.tolist(),
        "recovered": recovered,
        "actual": actual,
        "success": recovered == actual,
    }, counts


def main():
    # ─── 1. Key schedule and encrypt/decrypt check ───────────────────────────────
    round_keys = expand_key(config.MASTER_KEY, config.NUM_ROUND_KEYS)
    print(f"Master Key: {to_hex(config.MASTER_KEY, 20)}")
    print(f"Round Keys: {[to_hex(k) for k in round_keys]}")

    ciphertext = encrypt(config.SAMPLE_PLAINTEXT, round_keys)
    decrypted = decrypt(ciphertext, round_keys)
    print(f"Plaintext:  {to_hex(config.SAMPLE_PLAINTEXT)}")
    print(f"Ciphertext: {to_hex(ciphertext)}")
    print(f"Decrypted:  {to_hex(decrypted)}")

    # ─── 2. S-box analysis ───────────────────────────────────────────────────────
    in_mask, out_mask, best_bias = find_best_linear_approximation()
    in_diff, out_diff, best_prob = find_best_differential()
    print("\nS-box Linear Analysis:")
    print(f"Best linear approximation: input mask {in_mask:X}, output mask {out_mask:X}, "
          f"bias: {best_bias:.4f} (~{required_pairs(best_bias)} pairs for one S-box)")
    print(f"Best differential characteristic: input diff {in_diff:X}, output diff {out_diff:X}, "
          f"probability: {best_prob:.4f}")

    # ─── 3. Attacks ──────────────────────────────────────────────────────────────
    linear_result, linear_scores = run_linear_attack(round_keys)
    linear_result["success_probability"] = success_probability(
        linear_scores[linear_result["actual"]], linear_result["num_pairs"]
    )
    diff_result, diff_scores = run_differential_attack(round_keys)

    # ─── 4. Save results ─────────────────────────────────────────────────────────
    if config.PLOT_DIR is not None:
        os.makedirs(config.PLOT_DIR, exist_ok=True)
        plot_candidate_scores(
            linear_scores, os.path.join(config.PLOT_DIR, "linear_candidates.png"),
            title="Linear attack: |bias| per candidate", ylabel="|bias|",
            actual=linear_result["actual"]
        )
        plot_candidate_scores(
            diff_scores, os.path.join(config.PLOT_DIR, "differential_candidates.png"),
            title="Differential attack: matches per candidate", ylabel="Count",
            actual=diff_result["actual"]
        )
        plot_table(linear_approximation_table(), os.path.join(config.PLOT_DIR, "lat.png"),
                   title="S-box LAT", xlabel="Output mask", ylabel="Input mask")
        plot_table(difference_distribution_table(), os.path.join(config.PLOT_DIR, "ddt.png"),
                   title="S-box DDT", xlabel="Output difference", ylabel="Input difference")

    if config.RESULTS_FILE is not None:
        output = {
            "master_key": to_hex(config.MASTER_KEY, 20),
            "round_keys": [to_hex(k) for k in round_keys],
            "sample": {
                "plaintext": to_hex(config.SAMPLE_PLAINTEXT),
                "ciphertext": to_hex(ciphertext),
                "decrypted": to_hex(decrypted),
            },
            "best_linear_approximation": [in_mask, out_mask, best_bias],
            "best_differential": [in_diff, out_diff, best_prob],
            "linear_attack": linear_result,
            "differential_attack": diff_result,
        }
        with open(config.RESULTS_FILE, "w") as f:
            json.dump(output, f, indent=2)
        print(f"\nResults saved to {config.RESULTS_FILE}")


if __name__ == "__main__":
    main()
