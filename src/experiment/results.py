"""
Result recording for experiments.
"""

import logging
import os

import pandas as pd

logger = logging.getLogger(__name__)

RESULTS_FILE = 'experiment_results.csv'


def record_to_table(args, row, table_dir=None):
    """
    Append one result row to `table_dir/experiment_results.csv`.

    Every scalar entry of `args` becomes a column next to the entries of
    `row`. Columns missing from an existing table are added to it, filled
    with nulls for the earlier rows.

    Returns:
        str: path of the CSV file
    """
    table_dir = table_dir or args.get('table_dir', 'results')
    os.makedirs(table_dir, exist_ok=True)
    csv_file = os.path.join(table_dir, RESULTS_FILE)

    data_row = {}
    for key, value in args.items():
        if value is None or isinstance(value, (str, int, float, bool)):
            data_row[key] = value
    data_row.update(row)

    if os.path.exists(csv_file):
        existing_df = pd.read_csv(csv_file)
        all_columns = list(existing_df.columns)
        new_columns = [key for key in data_row if key not in all_columns]

        if new_columns:
            for col in new_columns:
                existing_df[col] = None
                all_columns.append(col)
            existing_df.to_csv(csv_file, index=False)

        new_row = {col: data_row.get(col, None) for col in all_columns}
        pd.DataFrame([new_row], columns=all_columns).to_csv(csv_file, mode='a', header=False, index=False)
    else:
        pd.DataFrame([data_row]).to_csv(csv_file, index=False)

    logger.info("Results recorded to: %s", csv_file)
    return csv_file
