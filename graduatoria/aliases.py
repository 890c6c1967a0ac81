# Tabella alias per i nomi delle università (versionata, non sparsa nel codice).
# university id -> aliases, exclude_if (veto se presenti nel nome normalizzato)
ALIASES_VERSION = 3

UNIVERSITY_ALIASES = {
    '26': {
        'aliases': ['SAPIENZA', 'ROMA SAPIENZA', 'LA SAPIENZA'],
        'exclude_if': ['TOR VERGATA'],
    },
    '27': {
        'aliases': ['TOR VERGATA', 'ROMA TOR VERGATA'],
    },
    '08': {
        'aliases': ['CATANIA'],
    },
    '03': {
        'aliases': ['BOLOGNA', 'ALMA MATER'],
    },
    '11': {
        'aliases': ['GENOVA'],
    },
    '15': {
        'aliases': ['STATALE MILANO', 'STATALE DI MILANO'],
        'exclude_if': ['BICOCCA', 'POLITECNICO'],
    },
    'C6': {
        'aliases': ['BICOCCA', 'MILANO-BICOCCA', 'MILANO BICOCCA'],
    },
    '20': {
        'aliases': ['PALERMO'],
    },
    '18': {
        'aliases': ['NAPOLI FEDERICO II', 'FEDERICO II'],
        'exclude_if': ['PARTHENOPE', 'VANVITELLI', 'CAMPANIA'],
    },
    '41': {
        'aliases': ['PARTHENOPE', 'NAPOLI PARTHENOPE'],
    },
    '49': {
        'aliases': ['VANVITELLI', 'CAMPANIA VANVITELLI', 'LUIGI VANVITELLI'],
    },
}
