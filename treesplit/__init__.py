from treesplit.boltzmann import (  # noqa: F401
    BoltzmannSampler,
    GeneratorExhausted,
    generate_random_tree,
    random_leaf,
)
from treesplit.fingerprint import fingerprint_tree  # noqa: F401
from treesplit.naive import random_child_naive, random_split_naive  # noqa: F401
from treesplit.rng import SequenceSource, UniformSource, make_source  # noqa: F401
from treesplit.split import SplitEvent, random_child, random_split, select_candidate  # noqa: F401
from treesplit.stats import chi_squared, expected_histogram, selection_histogram  # noqa: F401
from treesplit.text import parse_tree, render_tree  # noqa: F401
from treesplit.trace import JSONLTracer, open_trace  # noqa: F401
from treesplit.trees import (  # noqa: F401
    Branch,
    InvalidLabel,
    Leaf,
    Tree,
    TreeSyntaxError,
    branch,
    count_leaves,
    count_nodes,
    depth,
    iter_subtrees,
    leaf,
    sum_labels,
    tree_from_dict,
    tree_to_dict,
)
from treesplit.zipper import Candidate, Context, LeftHole, NoContext, RightHole, iter_focus  # noqa: F401
