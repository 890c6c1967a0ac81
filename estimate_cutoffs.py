"""
Report a riga di comando: scarica i dati, ricalcola tutto e stampa
minimo nazionale, proiezione e minimi per ateneo.

    python estimate_cutoffs.py [--no-survey] [--method per-university] [--media 22.5 --ateneo "..."]
"""

import argparse
import sys

from graduatoria.config import PROJECTION_METHODS, PipelineConfig
from graduatoria.fetch import FetchError, fetch_results, fetch_universities
from graduatoria.formatters import format_university_name
from graduatoria.pipeline import build_dashboard


def main(argv=None):
    parser = argparse.ArgumentParser(description="Stima dei minimi di ammissione")
    parser.add_argument('--no-survey', action='store_true', help="escludi i dati da sondaggio")
    parser.add_argument('--method', choices=PROJECTION_METHODS, default='national')
    parser.add_argument('--media', type=float, help="media da simulare")
    parser.add_argument('--ateneo', help="ateneo per la simulazione")
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args(argv)

    print("=" * 60)
    print("🎓 STIMA MINIMI DI AMMISSIONE")
    print("=" * 60)

    try:
        raw_results = fetch_results(verbose=args.verbose)
        raw_universities = fetch_universities(verbose=args.verbose)
    except FetchError as e:
        print(f"❌ {e}")
        return 1

    config = PipelineConfig(include_survey_data=not args.no_survey, projection_method=args.method)
    data = build_dashboard(raw_results, raw_universities, config, verbose=args.verbose)

    s = data.summary
    print(f"\n📊 {s['total_result_count']} esami, {s['unique_student_count']} studenti, "
          f"{s['total_universities']} atenei")
    print(f"   Idonei: {s['fully_qualified_count']} | Potenziali: {s['almost_qualified_count']} | "
          f"Posti rimanenti: {s['remaining_spots']}")

    p = data.projection
    print(f"\n📈 Proiezione ({p.method}): {p.estimated_qualified} idonei, "
          f"{p.estimated_potential} potenziali su {p.estimated_total_students} iscritti")

    cutoff = data.national_cutoff
    if cutoff is None:
        print("\n⚠️ Minimo nazionale non disponibile")
    else:
        print(f"\n🏁 Media minima nazionale: {cutoff.minimum_average:.2f} "
              f"(posizione {cutoff.cutoff_position}/{cutoff.actual_eligible} nel campione)")
        if cutoff.below_official_floor:
            print("   ⚠️ sotto il 18: il minimo effettivo resta 18")

    table = data.simulator.university_cutoffs()
    if not table.empty:
        table['name'] = table['name'].map(format_university_name)
        print("\n" + "-" * 60)
        print("🏫 MINIMI PER ATENEO")
        print("-" * 60)
        cols = ['name', 'scaled_seats', 'applicants', 'realistic_average', 'worst_case_average']
        print(table[cols].round(2).to_string(index=False))

    if args.media is not None and args.ateneo:
        result = data.simulator.simulate_candidate(args.media, args.ateneo)
        print("\n" + "-" * 60)
        if result is None:
            print(f"❌ Ateneo non trovato o senza dati: {args.ateneo}")
        else:
            print(f"🎯 Media {args.media}: {result.status} "
                  f"(posizione {result.university_position} nell'ateneo, "
                  f"{result.displaced_above} ricollocati sopra, {result.scaled_seats} posti scalati)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
