"""
Plotting code for district plans and efficiency gap distributions.
"""

import os
from functools import wraps

import matplotlib.patches as mpatches
import matplotlib.pyplot as plt
import networkx as nx
import numpy as np

from gerrymander.redistricting import as_plan, district_summary

# Consistent use of colors for parties
GOP_COLOR = "red"
DEM_COLOR = "blue"

DISTRICT_CMAP = "tab20"


def plot_styler(
    save_dir="plots/",
    facecolor="#FBF6ED",
):
    """
    A decorator for matplotlib plotting functions to abstract away boilerplate code.

    This decorator handles:
    1. Setting the background colors for the figure, axes, and saved file.
    2. Saving the figure to a specified directory if a 'filename' kwarg is provided.
    3. Showing the plot (can be disabled with show_plot=False).
    4. Cleaning up the plot figure after saving/showing to prevent state leakage.

    Args:
        save_dir (str): The directory where plots will be saved.
        facecolor (str): Background color for the figure, axes and saved file.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            """
            Wrapper function that applies styling, saves, and shows the plot.

            NOTE: The decorated function should not call plt.savefig() or plt.show().

            Additional kwargs accepted by the wrapper at call time:
                filename (str, optional): If provided, the plot is saved with this
                                          name in the `save_dir`. Defaults to None.
                save_dir (str, optional): Overrides the decorator's `save_dir`.
                show_plot (bool, optional): If True, plt.show() is called.
                                            Defaults to True.
            """
            filename = kwargs.pop("filename", None)
            target_dir = kwargs.pop("save_dir", save_dir)
            show_plot = kwargs.pop("show_plot", True)

            original_params = {
                "savefig.facecolor": plt.rcParams["savefig.facecolor"],
                "figure.facecolor": plt.rcParams["figure.facecolor"],
                "axes.facecolor": plt.rcParams["axes.facecolor"],
            }

            try:
                plt.rcParams["savefig.facecolor"] = facecolor
                plt.rcParams["figure.facecolor"] = facecolor
                plt.rcParams["axes.facecolor"] = facecolor

                func_result = func(*args, **kwargs)

                plt.tight_layout()

                if filename:
                    if not os.path.exists(target_dir):
                        os.makedirs(target_dir)
                    full_path = os.path.join(target_dir, filename)
                    plt.savefig(full_path)
                    print(f"Plot saved to '{full_path}'")

                if show_plot:
                    plt.show()

                plt.close("all")

                return func_result

            finally:
                plt.rcParams.update(original_params)

        return wrapper

    return decorator


def grid_positions(width, height):
    """Node positions for precincts laid out row-major on a grid."""
    return {
        precinct_id: (precinct_id % width, -(precinct_id // width))
        for precinct_id in range(width * height)
    }


@plot_styler()
def plot_plan(registry, plan, pos=None, title=None):
    """
    Draws the precinct graph with one color per district.

    Node borders show each precinct's majority party. District labels in the
    legend carry the district's winner.

    Returns:
        dict: Precinct id to district index, as drawn.
    """
    graph = registry.graph
    districts = as_plan(plan)
    if pos is None:
        pos = nx.spring_layout(graph, seed=0)

    assignment = {
        precinct_id: i
        for i, district in enumerate(districts)
        for precinct_id in district
    }
    nodes = [n for n in graph.nodes if n in assignment]
    cmap = plt.get_cmap(DISTRICT_CMAP)

    plt.figure(figsize=[8, 8])
    nx.draw_networkx_edges(graph, pos, ax=plt.gca(), edge_color="#999999")
    nx.draw_networkx_nodes(
        graph,
        pos,
        nodelist=nodes,
        node_color=[cmap(assignment[n] % cmap.N) for n in nodes],
        edgecolors=[
            DEM_COLOR if graph.nodes[n]["dem"] > graph.nodes[n]["rep"] else GOP_COLOR
            for n in nodes
        ],
        linewidths=2.0,
        ax=plt.gca(),
    )

    summary = district_summary(registry, districts)
    handles = [
        mpatches.Patch(
            color=cmap(i % cmap.N),
            label=f"District {i} ({row['winner']}, pop {row['pop']})",
        )
        for i, row in summary.iterrows()
    ]
    plt.legend(handles=handles, loc="upper right", fontsize="small")
    if title:
        plt.title(title)
    plt.gca().set_axis_off()
    return assignment


@plot_styler(facecolor="lightgray")
def plot_efficiency_gap_distribution(scores, threshold=None, title=None):
    """Histogram of efficiency gap scores from many random plans."""
    scores = np.asarray(scores)
    plt.figure(figsize=[10, 6])
    plt.hist(scores, bins=np.arange(0, 102), alpha=0.75, facecolor="gray")
    if threshold is not None:
        plt.axvline(threshold, ls="--", lw=2.0, c="k", label=f"Threshold {threshold}")
        plt.legend(loc="upper right")
    plt.xlabel("Efficiency Gap (%)")
    plt.ylabel("Plans")
    if title:
        plt.title(title)
    return np.histogram(scores, bins=np.arange(0, 102))[0]
