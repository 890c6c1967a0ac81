"""
Parsing of the two remote feeds into DataFrames.

Results feed rows:
    {etichetta, punteggio (stringa decimale, anche negativa), materia,
     is_from_survey, universita: {nome, id}}
Universities feed rows:
    {nome, id, region}
"""

import pandas as pd

from .config import RECORD_COLUMNS, REGION_FIXES, SUBJECT_MAP, SUBJECTS
from .sources import classify_label, is_valid_label

UNIVERSITY_COLUMNS = ['id', 'name', 'region']

FEED_KEYS = {
    'etichetta': 'label',
    'punteggio': 'score',
    'materia': 'subject',
    'universita.nome': 'university_name',
    'universita.id': 'university_id',
}


def empty_records():
    df = pd.DataFrame({col: pd.Series(dtype='object') for col in RECORD_COLUMNS})
    df['score'] = df['score'].astype(float)
    df['is_from_survey'] = df['is_from_survey'].astype(bool)
    return df


def _to_subject(value):
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    if value in SUBJECTS:
        return value
    return SUBJECT_MAP.get(value)


def load_results(payload, verbose=False):
    """Results feed (list of dicts) -> ExamRecord DataFrame.

    Rows with a non numeric score, an unknown subject or no label are dropped.
    Duplicated (label, subject) pairs keep the last row.
    """
    if not payload:
        return empty_records()

    df = pd.json_normalize(list(payload)).rename(columns=FEED_KEYS)
    for col in ['label', 'score', 'subject', 'university_name', 'university_id', 'is_from_survey']:
        if col not in df.columns:
            df[col] = None

    n_raw = len(df)
    df['label'] = df['label'].astype('string').str.strip()
    df['score'] = pd.to_numeric(df['score'], errors='coerce')
    df['subject'] = df['subject'].map(_to_subject)
    df = df.dropna(subset=['label', 'score', 'subject'])
    df = df[df['label'] != '']

    df['label'] = df['label'].astype(str)
    df['source'] = df['label'].map(classify_label)
    flag = df['is_from_survey'].fillna(False).astype(bool)
    df['is_from_survey'] = flag | (df['source'] != 'ministerial')
    df['university_id'] = df['university_id'].map(lambda x: None if pd.isna(x) else str(x))
    df['university_name'] = df['university_name'].map(lambda x: None if pd.isna(x) else str(x))

    # l'ultimo record vince, ma resta nella posizione del primo
    df = df.reset_index(drop=True)
    df['_pos'] = df.index.to_series().groupby([df['label'], df['subject']]).transform('min')
    df = df.drop_duplicates(subset=['label', 'subject'], keep='last')
    df = df.sort_values('_pos', kind='mergesort')
    df = df[RECORD_COLUMNS].reset_index(drop=True)

    if verbose:
        dropped = n_raw - len(df)
        print(f"✅ Risultati caricati: {len(df)} esami")
        if dropped:
            print(f"⚠️ Scartate {dropped} righe (punteggio/materia non validi o duplicati)")
        odd = df.loc[~df['label'].map(is_valid_label), 'label'].unique()
        if len(odd):
            print(f"⚠️ {len(odd)} etichette fuori formato: {', '.join(odd[:5])}")
    return df


def load_universities(payload):
    """Universities feed -> DataFrame (id, name, region) with the region typo fixed."""
    if not payload:
        return pd.DataFrame({col: pd.Series(dtype='object') for col in UNIVERSITY_COLUMNS})

    df = pd.DataFrame(list(payload)).rename(columns={'nome': 'name'})
    for col in UNIVERSITY_COLUMNS:
        if col not in df.columns:
            df[col] = None
    df = df[UNIVERSITY_COLUMNS].copy()
    df['id'] = df['id'].map(lambda x: None if pd.isna(x) else str(x))
    df['region'] = df['region'].replace(REGION_FIXES)
    return df.reset_index(drop=True)


def filter_survey(records, include_survey_data=True):
    """Drop survey records unless they are requested."""
    if include_survey_data:
        return records
    return records[~records['is_from_survey']].reset_index(drop=True)
