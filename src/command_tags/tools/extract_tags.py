"""表形式データ（CSV/Parquet/JSON/テキスト）の文字列列からコマンドタグを抽出して書き出す。"""

from __future__ import annotations

import argparse
from pathlib import Path

import polars as pl
from loguru import logger

from command_tags.batch import extract_tags_frame
from command_tags.config import TagConfig, load_tag_config

_READERS = {
    ".csv": pl.read_csv,
    ".parquet": pl.read_parquet,
    ".json": pl.read_json,
    ".ndjson": pl.read_ndjson,
    ".jsonl": pl.read_ndjson,
}


def read_input(path: Path, column: str) -> pl.DataFrame:
    """入力ファイルを DataFrame として読み込む（.txt は1行1レコード）.

    Raises:
        FileNotFoundError: ファイルが存在しない場合
        ValueError: 対応していない拡張子の場合
    """
    if not path.exists():
        raise FileNotFoundError(f"Input file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".txt":
        lines = path.read_text(encoding="utf-8").splitlines()
        return pl.DataFrame({column: lines}, schema={column: pl.Utf8})

    reader = _READERS.get(suffix)
    if reader is None:
        msg = f"Unsupported input format: {suffix} (supported: .txt, {', '.join(_READERS)})"
        raise ValueError(msg)
    return reader(path)


def write_output(df: pl.DataFrame, path: Path) -> None:
    """結果を拡張子に応じた形式で書き出す（CSV は matches をカンマ区切りに結合）.

    Raises:
        ValueError: 対応していない拡張子の場合
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        df.with_columns(pl.col("matches").list.join(",")).write_csv(path)
    elif suffix == ".parquet":
        df.write_parquet(path)
    elif suffix == ".json":
        df.write_json(path)
    else:
        msg = f"Unsupported output format: {suffix} (supported: .csv, .parquet, .json)"
        raise ValueError(msg)


def build_config(args: argparse.Namespace) -> TagConfig:
    """--config と個別指定のオプションを合成する（個別指定が優先）."""
    config = load_tag_config(args.config) if args.config else TagConfig()
    if args.tag:
        config.tags.extend(args.tag)
    if args.prefix is not None:
        config.options["prefix"] = args.prefix
    if args.remove_all_tags:
        config.options["remove_all_tags"] = True
    return config


def extract_tags_file(
    input_path: Path,
    out_path: Path,
    config: TagConfig,
    column: str = "text",
) -> int:
    """入力ファイルの1列を解析して書き出す.

    Returns:
        書き出した行数
    """
    df = read_input(input_path, column)
    result = extract_tags_frame(df, column, config.options, config.tags)
    write_output(result, out_path)
    return len(result)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Extract inline command tags (e.g. --bold, --size 10) from a text column"
    )
    parser.add_argument("--input", type=Path, required=True, help="Input file (.csv/.parquet/.json/.ndjson/.txt)")
    parser.add_argument("--out", type=Path, required=True, help="Output file (.csv/.parquet/.json)")
    parser.add_argument("--column", default="text", help="Text column to parse (default: text)")
    parser.add_argument("--config", type=Path, default=None, help="YAML tag set (prefix, options, tags)")
    parser.add_argument(
        "--tag",
        action="append",
        default=None,
        help='Tag spec (repeatable). Example: --tag bold --tag "size 10"',
    )
    parser.add_argument("--prefix", default=None, help="Tag prefix, written as --prefix=~~ (default: --)")
    parser.add_argument("--remove-all-tags", action="store_true", help="Also strip unrecognized prefixed words")
    args = parser.parse_args(argv)

    logger.enable("command_tags")

    config = build_config(args)
    if not config.tags:
        logger.warning("No tags given; only --remove-all-tags stripping will apply")

    count = extract_tags_file(args.input, args.out, config, column=args.column)
    print(f"Wrote {count} rows: {args.out}")


if __name__ == "__main__":
    main()
