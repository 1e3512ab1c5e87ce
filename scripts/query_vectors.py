import argparse
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from w2v_search.config import settings
from w2v_search.vectors import WordVectorsError, analogy, load_word_vectors, nearest


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Query a word2vec model for nearest neighbours or analogies."
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=settings.vectors_path,
        help="Model file (.bin is read as binary, anything else as text).",
    )
    parser.add_argument("--text", action="store_true", help="Force the text format.")
    parser.add_argument("--nearest", metavar="WORD", help="Word to find neighbours of.")
    parser.add_argument("--positive", nargs="*", default=[], metavar="WORD")
    parser.add_argument("--negative", nargs="*", default=[], metavar="WORD")
    parser.add_argument("-n", type=int, default=settings.default_top_n)
    parser.add_argument("--limit", type=int, default=settings.vocab_limit)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    binary = False if args.text else settings.vectors_binary

    try:
        print(f"Loading {args.path}...")
        store = load_word_vectors(
            args.path,
            binary=binary,
            encoding=settings.vectors_encoding,
            limit=args.limit,
        )
        print(f"Loaded {len(store)} words, {store.vector_size} dimensions.")

        if args.nearest:
            results = nearest(store, args.nearest, args.n)
        else:
            results = analogy(store, args.positive, args.negative, args.n)
    except (OSError, ValueError, WordVectorsError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for rank, (word, score, _) in enumerate(results, start=1):
        print(f"{rank:>3}. {word}\t{score:.4f}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
