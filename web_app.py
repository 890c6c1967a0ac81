import streamlit as st
import pandas as pd
import plotly.express as px

from graduatoria.config import CACHE_TTL, ITEMS_PER_PAGE, OFFICIAL_MIN_SCORE, SUBJECTS, PipelineConfig
from graduatoria.coverage import coverage_breakdown
from graduatoria.fetch import FetchError, fetch_results, fetch_universities
from graduatoria.formatters import format_university_name
from graduatoria.pipeline import build_dashboard
from graduatoria.rankings import general_ranking, paginate, score_distribution, subject_ranking
from graduatoria.sources import source_counts

# ================= CONFIG & LOAD DATA =================
st.set_page_config(page_title="Graduatoria Semestre Filtro", page_icon="🎓", layout="wide")

SUBJECT_LABELS = {'physics': 'Fisica', 'chemistry': 'Chimica', 'biology': 'Biologia'}
STATUS_LABELS = {
    'guaranteed': "🟢 Ammissione molto probabile",
    'at_risk': "🟡 A rischio (dipende dagli studenti ricollocati)",
    'unlikely': "🔴 Improbabile",
}


@st.cache_data(ttl=CACHE_TTL, show_spinner="Scarico i dati...")
def load_feeds():
    """Scarica risultati + atenei (cache 5 minuti)"""
    return fetch_results(), fetch_universities()


def fmt(value, digits=2):
    if value is None or pd.isna(value):
        return "N/D"
    return f"{value:.{digits}f}"


# ================= SIDEBAR =================
with st.sidebar:
    st.header("⚙️ Impostazioni")
    include_survey = st.toggle("Includi dati da sondaggio", value=True)
    method_label = st.radio("Metodo di proiezione", ["Nazionale", "Per ateneo"])
    projection_method = 'national' if method_label == "Nazionale" else 'per-university'

    st.write("---")
    st.header("🎯 Simula la tua ammissione")
    user_average = st.number_input("La tua media", -3.0, 31.0, 22.0, step=0.25)

try:
    raw_results, raw_universities = load_feeds()
except FetchError as e:
    st.error(f"❌ Impossibile caricare i dati: {e}")
    if st.button("🔄 Riprova"):
        load_feeds.clear()
        st.rerun()
    st.stop()

config = PipelineConfig(include_survey_data=include_survey, projection_method=projection_method)
data = build_dashboard(raw_results, raw_universities, config)
summary = data.summary

with st.sidebar:
    uni_names = data.universities['name'].tolist()
    user_uni = st.selectbox("Il tuo ateneo", uni_names, format_func=format_university_name)

# ================= MAIN PAGE =================
st.title("🎓 Graduatoria Semestre Filtro")
st.markdown("*Tutti i valori sono stime basate sui dati raccolti, non dati ufficiali.*")

col1, col2, col3, col4 = st.columns(4)
col1.metric("Posti disponibili", f"{summary['total_spots']:,}")
col2.metric("Idonei (3 esami ≥ 18)", summary['fully_qualified_count'])
col3.metric("Potenzialmente idonei", summary['almost_qualified_count'])
col4.metric("Studenti unici", summary['unique_student_count'])

proj = data.projection
st.info(
    f"📈 **Proiezione ({method_label.lower()})**: ~{proj.estimated_qualified:,} idonei e "
    f"~{proj.estimated_potential:,} potenzialmente idonei su {proj.estimated_total_students:,} iscritti"
)

cutoff = data.national_cutoff
if cutoff is not None:
    st.success(
        f"🏁 **Media minima nazionale stimata: {fmt(cutoff.minimum_average)}** "
        f"(totale {fmt(cutoff.minimum_total, 1)})"
    )
    if cutoff.below_official_floor:
        st.caption(f"⚠️ Il minimo effettivo resta comunque {OFFICIAL_MIN_SCORE} per ogni esame.")

stats = source_counts(data.students)
st.caption(
    f"Dati raccolti: {stats['total']:,} studenti ({stats['collected_percent']:.1f}% degli iscritti) - "
    f"ministeriali {stats['ministerial']}, sondaggio interno {stats['internal_survey']}, "
    f"UniMi {stats['unimi_survey']}, Logica {stats['logica_survey']}"
)

tab_sim, tab_rank, tab_dist, tab_uni, tab_reg = st.tabs([
    "🎯 Simulazione", "🏆 Classifiche", "📊 Distribuzione", "🏫 Atenei", "🗺️ Regioni",
])

with tab_sim:
    result = data.simulator.simulate_candidate(user_average, user_uni)
    if result is None:
        st.warning("Nessun dato su posti/iscritti per questo ateneo: simulazione non disponibile.")
    else:
        st.subheader(STATUS_LABELS[result.status])
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Posizione nazionale (campione)", result.global_position)
        c2.metric("Posizione nell'ateneo", result.university_position)
        c3.metric("Ricollocati sopra di te", result.displaced_above)
        c4.metric("Posti scalati / reali", f"{result.scaled_seats} / {result.real_seats}")

        uni_cutoff = data.simulator.university_cutoff(result.university_id)
        if uni_cutoff is not None:
            st.write(
                f"**Media minima stimata** - realistica: {fmt(uni_cutoff.realistic_average)}, "
                f"caso peggiore: {fmt(uni_cutoff.worst_case_average)}"
            )

with tab_rank:
    search = st.text_input("🔍 Cerca etichetta o ateneo")
    view = st.radio("Classifica", ["Generale"] + [SUBJECT_LABELS[s] for s in SUBJECTS], horizontal=True)
    if view == "Generale":
        ranking = general_ranking(data.students, search)
        cols = ['position', 'label', 'average'] + SUBJECTS + ['university_name']
    else:
        subject = next(s for s, label in SUBJECT_LABELS.items() if label == view)
        ranking = subject_ranking(data.records, subject, search)
        cols = ['position', 'label', 'score', 'university_name']
    total_pages = max(1, -(-len(ranking) // ITEMS_PER_PAGE))
    page = st.number_input("Pagina", 1, total_pages, 1)
    page_rows, _ = paginate(ranking, page)
    st.dataframe(page_rows[cols], use_container_width=True, hide_index=True)
    st.caption(f"{len(ranking)} risultati")

with tab_dist:
    dist_view = st.radio("Mostra", ["Media"] + [SUBJECT_LABELS[s] for s in SUBJECTS], horizontal=True, key="dist")
    selected = st.multiselect("Filtra atenei", uni_names, format_func=format_university_name)
    key = 'average' if dist_view == "Media" else next(s for s, l in SUBJECT_LABELS.items() if l == dist_view)
    dist = score_distribution(data.records, data.students, key, selected or None)
    fig = px.bar(dist, x='score', y='count', labels={'score': 'Punteggio', 'count': 'Studenti'})
    st.plotly_chart(fig, use_container_width=True)

with tab_uni:
    table = data.universities.copy()
    table['name'] = table['name'].map(format_university_name)
    st.dataframe(
        table[['name', 'region', 'student_count', 'average_score', 'fully_qualified_count',
               'potentially_qualified_count', 'coverage_percent', 'is_from_survey']],
        use_container_width=True,
        hide_index=True,
    )
    detail_uni = st.selectbox("Dettaglio copertura", uni_names, format_func=format_university_name)
    detail = None
    if detail_uni is not None:
        entity = data.universities.set_index('name').loc[detail_uni]
        detail = coverage_breakdown(entity, data.simulator.resolver.reference_row(entity['enrollment_id']))
    if detail is None:
        st.info("Nessun dato di iscrizione per questo ateneo.")
    else:
        unit = "esami" if detail['unit'] == 'exams' else "studenti"
        st.write(f"**{detail['collected']:,} {unit}** raccolti su {detail['expected']:,} attesi")
        st.dataframe(pd.DataFrame(detail['sources']), hide_index=True)
        if detail['has_official_coverage']:
            st.warning("⚠️ Dati ministeriali parziali: possibili sovrapposizioni con i sondaggi.")

with tab_reg:
    if not data.regions.empty:
        fig = px.bar(data.regions, x='name', y='average_score', color='student_count',
                     labels={'name': 'Regione', 'average_score': 'Media', 'student_count': 'Studenti'})
        st.plotly_chart(fig, use_container_width=True)
    st.dataframe(data.regions, use_container_width=True, hide_index=True)
