import pandas as pd


def _table(records, columns):
    if not records:
        return ""
    return pd.DataFrame(records, columns=columns).to_string(index=False)


def overview_text(overview):
    return "\n".join([
        f"File name: {overview['file_name']}",
        f"Number of rows: {overview['row_count']}",
        f"Number of columns: {overview['column_count']}",
    ])


def missing_summary_text(summary):
    records = [
        (col['name'], col['missing_count'], round(col['missing_fraction'] * 100, 2))
        for col in summary['columns']
    ]
    return _table(records, ['variable', 'n_miss', 'pct_miss'])


def blank_rows_text(blank_rows):
    if not blank_rows['count']:
        return blank_rows['message']
    return "\n".join([
        f"Total completely blank rows: {blank_rows['count']}",
        f"Row indices: {', '.join(str(i) for i in blank_rows['rows'])}",
    ])


def structure_text(structure, row_count):
    lines = [f"{row_count} obs. of {len(structure)} variables:"]
    for col in structure:
        sample = " ".join("NA" if value is None else repr(value) for value in col['sample'])
        lines.append(f" $ {col['name']}: {col['kind']} ({col['dtype']}) {sample}")
    return "\n".join(lines)


def numeric_text(numeric):
    if numeric['message']:
        return numeric['message']
    records = [
        (col['name'], col['min'], col['q1'], col['median'], col['mean'], col['q3'], col['max'], col['missing'])
        for col in numeric['columns']
    ]
    return _table(records, ['column', 'Min.', '1st Qu.', 'Median', 'Mean', '3rd Qu.', 'Max.', "NA's"])


def categorical_text(categorical):
    if categorical['message']:
        return categorical['message']
    blocks = []
    for col in categorical['columns']:
        lines = [f"${col['name']}", f"  Distinct values: {col['distinct_count']}", "  Top 5 most frequent:"]
        for entry in col['top_values']:
            value = "<NA>" if entry['value'] is None else entry['value']
            lines.append(f"    {value}: {entry['count']}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def full_report(overview, missingness, profile):
    """Every text summary of a dataset, one titled section each"""
    sections = [
        ("General information", overview_text(overview)),
        ("Missing values (NA) per column", missing_summary_text(missingness['summary'])),
        ("Completely blank rows", blank_rows_text(missingness['blank_rows'])),
        ("Structure and data types", structure_text(profile['structure'], overview['row_count'])),
        ("Statistical summary (numeric columns)", numeric_text(profile['numeric'])),
        ("Unique value counts (categorical columns)", categorical_text(profile['categorical'])),
    ]
    return "\n\n".join(f"== {title} ==\n{body}" for title, body in sections) + "\n"
