import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np


def plot_candidate_scores(scores, path: str, title: str = "Key candidate scores",
                          ylabel: str = "Score", actual: int = None) -> str:
    """
    Bar chart of the 16 key-nibble candidate scores, with the true nibble
    highlighted when it is known. Saves to path and returns it.
    """
    scores = np.asarray(scores)
    colors = ["steelblue"] * len(scores)
    if actual is not None:
        colors[actual] = "crimson"

    plt.figure(figsize=(8, 3))
    plt.bar(np.arange(len(scores)), scores, color=colors)
    plt.xticks(np.arange(len(scores)), [format(k, "X") for k in range(len(scores))])
    plt.xlabel("Key nibble candidate")
    plt.ylabel(ylabel)
    plt.title(title)
    plt.tight_layout()
    plt.savefig(path)
    plt.close()
    return path


def plot_table(table, path: str, title: str, xlabel: str, ylabel: str) -> str:
    """Heatmap of a 16x16 S-box table (LAT or DDT)."""
    table = np.asarray(table)

    plt.figure(figsize=(6, 5))
    plt.imshow(table, cmap="coolwarm", origin="upper")
    plt.colorbar()
    ticks = np.arange(table.shape[0])
    plt.xticks(ticks, [format(k, "X") for k in ticks])
    plt.yticks(ticks, [format(k, "X") for k in ticks])
    plt.xlabel(xlabel)
    plt.ylabel(ylabel)
    plt.title(title)
    plt.tight_layout()
    plt.savefig(path)
    plt.close()
    return path
