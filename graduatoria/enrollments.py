"""
Static enrollment reference table.

One row per known university:
- exam_registrants   : iscritti all'appello (exam takers)
- course_registrants : iscritti al corso di laurea
- available_seats    : posti disponibili nella sede
"""

import pandas as pd

ENROLLMENT_COLUMNS = ['id', 'name', 'exam_registrants', 'course_registrants', 'available_seats']

ENROLLMENTS = [
    {'id': '01', 'name': "Università Politecnica delle MARCHE", 'exam_registrants': 876, 'course_registrants': 1003, 'available_seats': 389},
    {'id': '02', 'name': "Università degli Studi di BARI ALDO MORO", 'exam_registrants': 2323, 'course_registrants': 2655, 'available_seats': 534},
    {'id': '03', 'name': "Alma Mater Studiorum - Università di BOLOGNA", 'exam_registrants': 2672, 'course_registrants': 3351, 'available_seats': 929},
    {'id': '04', 'name': "Università degli Studi di CAGLIARI", 'exam_registrants': 1155, 'course_registrants': 1398, 'available_seats': 330},
    {'id': '05', 'name': "Università della CALABRIA", 'exam_registrants': 715, 'course_registrants': 865, 'available_seats': 173},
    {'id': '06', 'name': "Università degli Studi di CAMERINO", 'exam_registrants': 85, 'course_registrants': 96, 'available_seats': 65},
    {'id': '08', 'name': "Università degli Studi di CATANIA", 'exam_registrants': 1886, 'course_registrants': 2284, 'available_seats': 526},
    {'id': '09', 'name': "Università degli Studi di FERRARA", 'exam_registrants': 871, 'course_registrants': 1016, 'available_seats': 616},
    {'id': '10', 'name': "Università degli Studi di FIRENZE", 'exam_registrants': 1497, 'course_registrants': 1643, 'available_seats': 615},
    {'id': '11', 'name': "Università degli Studi di GENOVA", 'exam_registrants': 979, 'course_registrants': 979, 'available_seats': 375},
    {'id': '12', 'name': "Università del SALENTO", 'exam_registrants': 445, 'course_registrants': 525, 'available_seats': 150},
    {'id': '14', 'name': "Università degli Studi di MESSINA", 'exam_registrants': 1015, 'course_registrants': 1119, 'available_seats': 770},
    {'id': '15', 'name': "Università degli Studi di MILANO", 'exam_registrants': 3122, 'course_registrants': 3560, 'available_seats': 728},
    {'id': '17', 'name': "Università degli Studi di MODENA e REGGIO EMILIA", 'exam_registrants': 765, 'course_registrants': 875, 'available_seats': 250},
    {'id': '18', 'name': "Università degli Studi di Napoli Federico II", 'exam_registrants': 3139, 'course_registrants': 3704, 'available_seats': 911},
    {'id': '19', 'name': "Università degli Studi di PADOVA", 'exam_registrants': 3409, 'course_registrants': 3746, 'available_seats': 713},
    {'id': '20', 'name': "Università degli Studi di PALERMO", 'exam_registrants': 1955, 'course_registrants': 2365, 'available_seats': 785},
    {'id': '21', 'name': "Università degli Studi di PARMA", 'exam_registrants': 1013, 'course_registrants': 1181, 'available_seats': 453},
    {'id': '22', 'name': "Università degli Studi di PAVIA", 'exam_registrants': 1087, 'course_registrants': 1207, 'available_seats': 450},
    {'id': '23', 'name': "Università degli Studi di PERUGIA", 'exam_registrants': 1210, 'course_registrants': 1366, 'available_seats': 566},
    {'id': '24', 'name': "Università di PISA", 'exam_registrants': 1087, 'course_registrants': 1764, 'available_seats': 468},
    {'id': '26', 'name': "Università degli Studi di ROMA \"La Sapienza\"", 'exam_registrants': 4003, 'course_registrants': 5147, 'available_seats': 1887},
    {'id': '27', 'name': "Università degli Studi di ROMA \"Tor Vergata\"", 'exam_registrants': 1609, 'course_registrants': 2030, 'available_seats': 822},
    {'id': '28', 'name': "Università degli Studi di SALERNO", 'exam_registrants': 741, 'course_registrants': 1296, 'available_seats': 228},
    {'id': '29', 'name': "Università degli Studi di SASSARI", 'exam_registrants': 727, 'course_registrants': 900, 'available_seats': 312},
    {'id': '30', 'name': "Università degli Studi di SIENA", 'exam_registrants': 409, 'course_registrants': 476, 'available_seats': 305},
    {'id': '31', 'name': "Università degli Studi di TORINO", 'exam_registrants': 1743, 'course_registrants': 2954, 'available_seats': 715},
    {'id': '33', 'name': "Università degli Studi di TRIESTE", 'exam_registrants': 549, 'course_registrants': 620, 'available_seats': 250},
    {'id': '34', 'name': "Università degli Studi di UDINE", 'exam_registrants': 372, 'course_registrants': 404, 'available_seats': 165},
    {'id': '38', 'name': "Università degli Studi della BASILICATA", 'exam_registrants': 229, 'course_registrants': 272, 'available_seats': 83},
    {'id': '39', 'name': "Università degli Studi del MOLISE", 'exam_registrants': 248, 'course_registrants': 267, 'available_seats': 192},
    {'id': '40', 'name': "Università degli Studi di VERONA", 'exam_registrants': 989, 'course_registrants': 1119, 'available_seats': 365},
    {'id': '41', 'name': "Università degli Studi di NAPOLI \"Parthenope\"", 'exam_registrants': 68, 'course_registrants': 88, 'available_seats': 88},
    {'id': '46', 'name': "Università degli Studi di BRESCIA", 'exam_registrants': 1203, 'course_registrants': 1327, 'available_seats': 335},
    {'id': '49', 'name': "Università degli Studi della Campania \"Luigi Vanvitelli\"", 'exam_registrants': 1227, 'course_registrants': 2000, 'available_seats': 795},
    {'id': '53', 'name': "Università degli Studi \"G. d'Annunzio\" CHIETI-PESCARA", 'exam_registrants': 880, 'course_registrants': 992, 'available_seats': 356},
    {'id': '55', 'name': "Università degli Studi dell'AQUILA", 'exam_registrants': 473, 'course_registrants': 564, 'available_seats': 228},
    {'id': '62', 'name': "Università degli Studi di TRENTO", 'exam_registrants': 401, 'course_registrants': 456, 'available_seats': 80},
    {'id': 'A8', 'name': "Università degli Studi di TERAMO", 'exam_registrants': 195, 'course_registrants': 223, 'available_seats': 80},
    {'id': 'C5', 'name': "Università degli Studi \"Magna Graecia\" di CATANZARO", 'exam_registrants': 738, 'course_registrants': 1213, 'available_seats': 593},
    {'id': 'C6', 'name': "Università degli Studi di MILANO-BICOCCA", 'exam_registrants': 968, 'course_registrants': 1195, 'available_seats': 211},
    {'id': 'C7', 'name': "Università degli Studi INSUBRIA Varese-Como", 'exam_registrants': 475, 'course_registrants': 539, 'available_seats': 241},
    {'id': 'C8', 'name': "Università degli Studi del PIEMONTE ORIENTALE", 'exam_registrants': 652, 'course_registrants': 708, 'available_seats': 280},
    {'id': 'C9', 'name': "Università degli Studi di FOGGIA", 'exam_registrants': 629, 'course_registrants': 727, 'available_seats': 300},
]

# Chiavi del formato esterno -> colonne interne
EXTERNAL_KEYS = {
    'nome': 'name',
    'iscrittiAppello': 'exam_registrants',
    'iscrittiCorso': 'course_registrants',
    'postiDisponibili': 'available_seats',
}


def load_enrollments(rows=None):
    """Build the reference DataFrame (index = university id).

    `rows` may use the internal column names or the external keys
    (nome, iscrittiAppello, iscrittiCorso, postiDisponibili).
    Missing counts become <NA>.
    """
    if rows is None:
        rows = ENROLLMENTS
    df = pd.DataFrame(list(rows)).rename(columns=EXTERNAL_KEYS)
    for col in ENROLLMENT_COLUMNS:
        if col not in df.columns:
            df[col] = None
    df = df[ENROLLMENT_COLUMNS].copy()
    df['id'] = df['id'].astype(str)
    for col in ['exam_registrants', 'course_registrants', 'available_seats']:
        df[col] = pd.to_numeric(df[col], errors='coerce').astype('Int64')
    df.index = df['id'].values
    return df


def total_exam_registrants(enrollments):
    """Sum of exam registrants over the rows that have the figure (0 if none)."""
    return int(enrollments['exam_registrants'].fillna(0).sum())
