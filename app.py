"""
Sentiment Board
Browser dashboard for batch sentiment analysis of short texts.
"""
import json
from pathlib import Path

from shiny import App, ui, render, reactive

from sentiment_board.analyzer import BatchAnalyzer
from sentiment_board.config import configure_logging, load_settings
from sentiment_board.controller import DashboardController, InvalidTransition, RunState, RunStatus, ValidationError
from sentiment_board.gemini_client import GeminiClient
from sentiment_board.input_collector import decode_upload
from sentiment_board.models import Sentiment
from sentiment_board import reporting

# Fails fast at startup when GEMINI_API_KEY is missing
settings = load_settings()
configure_logging(settings.log_level)
gemini_client = GeminiClient(settings.api_key, model=settings.model, timeout=settings.timeout)

SENTIMENT_EMOJI = {
    Sentiment.POSITIVE: "😊",
    Sentiment.NEGATIVE: "😠",
    Sentiment.NEUTRAL: "😐",
    Sentiment.MIXED: "🤔",
}

ENTRY_SCRIPT = """
function sbEdit(id, field, value) {
    Shiny.setInputValue('entry_edit', {id: id, field: field, value: value}, {priority: 'event'});
}
function sbPaste(ev, id) {
    var text = (ev.clipboardData || window.clipboardData).getData('text');
    var lines = text.split('\\n').filter(function(l) { return l.trim() !== ''; });
    if (lines.length > 1) {
        ev.preventDefault();
        Shiny.setInputValue('entry_paste', {id: id, text: text}, {priority: 'event'});
    }
}
function sbRemove(id) {
    Shiny.setInputValue('entry_remove', id, {priority: 'event'});
}
"""

app_ui = ui.page_fluid(
    ui.tags.head(
        ui.tags.style("""
            .entry-row { display:flex; gap:6px; align-items:flex-start; margin-bottom:10px; }
            .entry-fields { flex:1; }
            .entry-fields input { width:100%; margin-bottom:4px; padding:6px; border:1px solid #cbd5e1; border-radius:4px; background:#f8fafc; }
            .entry-fields input.entry-source { font-size:0.85em; color:#475569; }
            .summary-card { padding:14px; border-radius:8px; background:#f8fafc; border:1px solid #e2e8f0; }
            .summary-card .label { font-size:0.85em; color:#64748b; }
            .summary-card .value { font-size:1.8em; font-weight:700; color:#1e293b; }
            .split-bar { display:flex; height:16px; border-radius:8px; overflow:hidden; background:#e2e8f0; margin-top:10px; }
            .pill { font-size:0.75em; background:#e0e7ff; color:#4338ca; padding:2px 8px; border-radius:10px; margin-right:4px; }
            .sentiment-badge { font-size:0.8em; font-weight:700; padding:2px 10px; border-radius:10px; color:#fff; }
            #loading-overlay { position:fixed; top:0; left:0; width:100%; height:100%; display:flex; flex-direction:column; align-items:center; justify-content:center; background:rgba(255,255,255,0.88); z-index:10000; }
            .spinner { width:54px; height:54px; border:6px solid #e0e0e0; border-top-color:#007bff; border-radius:50%; animation: spin .8s linear infinite; margin-bottom:18px; }
            @keyframes spin { to { transform: rotate(360deg); } }
            .loading-msg { font-size:1.1em; color:#333; }
        """),
        ui.tags.script(ENTRY_SCRIPT),
        ui.tags.script(src="https://cdn.plot.ly/plotly-2.35.2.min.js")
    ),
    ui.panel_title("Sentiment Board", "Batch Sentiment Analysis Dashboard"),
    ui.layout_sidebar(
        ui.sidebar(
            ui.div(
                ui.h4("Input Data", style="display:inline-block;"),
                ui.input_action_link("load_samples", "Load Samples", style="float:right; margin-top:6px;"),
            ),
            ui.p("Add entries for each piece of text and its source. Pasting multiple lines in a text field will automatically create new entries.",
                 style="font-size:0.85em; color:#475569;"),
            ui.output_ui("entries_ui"),
            ui.input_action_button("add_entry", "+ Add Entry", class_="btn-outline-secondary w-100"),
            ui.input_file("upload", "Upload a file", accept=[".txt", ".csv"], multiple=False),
            ui.input_action_button("analyze_btn", "Analyze", class_="btn-primary btn-lg w-100"),
            ui.input_action_button("clear_btn", "Clear", class_="btn-outline-secondary w-100"),
            ui.br(), ui.hr(),
            ui.tags.div(ui.output_ui("status_display"), style="margin-top:10px;"),
            width=380
        ),
        ui.output_ui("main_ui")
    ),
    ui.output_ui("loading_overlay")
)


# Server Logic
def server(input, output, session):
    # Reactive values
    run_state = reactive.Value(RunState())
    # Bumped on structural changes only, so typing does not re-render the inputs
    entries_version = reactive.Value(0)
    has_content = reactive.Value(False)

    controller = DashboardController(
        BatchAnalyzer(gemini_client, temperature=settings.temperature),
        on_change=run_state.set,
    )
    collector = controller.collector

    def _entries_changed():
        entries_version.set(entries_version.get() + 1)
        has_content.set(collector.has_content())

    # Analyze stays disabled while blank or while a request is in flight
    @reactive.Effect
    def _sync_analyze_button():
        has_content.get()
        run_state.get()
        ui.update_action_button("analyze_btn", disabled=not controller.can_analyze())

    @output
    @render.ui
    def entries_ui():
        entries_version.get()
        entries = collector.entries
        single = len(entries) <= 1
        rows = []
        for entry in entries:
            rows.append(ui.div(
                ui.div(
                    ui.tags.input(
                        type="text",
                        value=entry.text,
                        placeholder='Text to analyze (e.g., "The product is amazing!")',
                        oninput=f"sbEdit('{entry.id}', 'text', this.value)",
                        onpaste=f"sbPaste(event, '{entry.id}')",
                    ),
                    ui.tags.input(
                        type="text",
                        value=entry.source,
                        placeholder="Source (e.g., 'Social Media')",
                        class_="entry-source",
                        oninput=f"sbEdit('{entry.id}', 'source', this.value)",
                    ),
                    class_="entry-fields"
                ),
                ui.tags.button(
                    "✕",
                    type="button",
                    title="Remove Entry",
                    class_="btn btn-sm btn-outline-danger",
                    disabled=True if single else None,
                    onclick=f"sbRemove('{entry.id}')",
                ),
                class_="entry-row"
            ))
        return ui.div(*rows)

    @reactive.Effect
    @reactive.event(input.entry_edit)
    def _edit_entry():
        edit = input.entry_edit()
        if not isinstance(edit, dict):
            return
        field = edit.get("field")
        value = edit.get("value") or ""
        if field == "text":
            collector.update_entry(edit.get("id"), text=value)
        elif field == "source":
            collector.update_entry(edit.get("id"), source=value)
        has_content.set(collector.has_content())

    @reactive.Effect
    @reactive.event(input.entry_paste)
    def _paste_entry():
        paste = input.entry_paste()
        if isinstance(paste, dict) and collector.paste_expand(paste.get("id"), paste.get("text") or ""):
            _entries_changed()

    @reactive.Effect
    @reactive.event(input.entry_remove)
    def _remove_entry():
        if collector.remove_entry(input.entry_remove()):
            _entries_changed()

    @reactive.Effect
    @reactive.event(input.add_entry)
    def _add_entry():
        collector.add_entry()
        _entries_changed()

    @reactive.Effect
    @reactive.event(input.load_samples)
    def _load_samples():
        collector.load_samples()
        _entries_changed()

    @reactive.Effect
    @reactive.event(input.upload)
    def _upload():
        files = input.upload()
        if not files:
            return
        info = files[0]
        content = decode_upload(Path(info["datapath"]).read_bytes())
        if collector.load_from_file(content, info.get("name")):
            _entries_changed()

    @reactive.Effect
    @reactive.event(input.clear_btn)
    def _clear():
        if run_state.get().loading:
            return
        controller.clear()
        _entries_changed()

    # Main analysis pipeline
    @reactive.Effect
    @reactive.event(input.analyze_btn)
    async def run_analysis():
        try:
            items = controller.begin()
        except (ValidationError, InvalidTransition):
            return
        # Ensure UI updates immediately
        await reactive.flush()
        await controller.execute(items)

    # Status display
    @output
    @render.ui
    def status_display():
        """Render status - always returns visible content."""
        base_style = "padding: 12px; background: #f8f9fa; border-radius: 4px; font-weight: 500; min-height: 50px; border: 1px solid #dee2e6;"
        state = run_state.get()

        if state.status is RunStatus.FAILED:
            return ui.div(
                ui.tags.strong("Error: ", style="color: #dc3545;"),
                ui.span(state.error, style="color: #dc3545;"),
                style=base_style
            )
        if state.loading:
            return ui.div(
                ui.tags.strong("Analyzing...", style="color: #0066cc; font-size: 1.05em;"),
                style=base_style + " background: #e7f3ff;"
            )
        if state.has_results:
            return ui.div(
                ui.tags.strong(f"✓ Analyzed {len(state.results)} input(s) with {settings.model}", style="color: #28a745; font-size: 1.05em;"),
                style=base_style + " background: #d4edda;"
            )
        return ui.div(
            ui.tags.strong("Ready to analyze content", style="color: #6c757d; font-size: 1.05em;"),
            style=base_style
        )

    # Loading overlay
    @output
    @render.ui
    def loading_overlay():
        """Show loading overlay only when processing."""
        if not run_state.get().loading:
            return ui.HTML("")
        return ui.div(
            ui.div(class_="spinner"),
            ui.div("Analyzing sentiment…", class_="loading-msg", style="font-weight:600; font-size:1.3em;"),
            ui.div("The whole batch is sent to the model in a single request.", style="font-size:0.95em; color:#666; margin-top:10px;"),
            id="loading-overlay"
        )

    @output
    @render.ui
    def main_ui():
        state = run_state.get()
        if state.status is RunStatus.FAILED:
            return ui.div(
                ui.h3("Analysis Failed", style="color:#dc2626;"),
                ui.p(state.error, style="color:#dc2626; max-width:520px;"),
                style="text-align:center; padding:60px 20px;"
            )
        if not state.has_results:
            return ui.div(
                ui.h2("Sentiment Analysis Dashboard"),
                ui.p("Add text with its source, upload a file, and click 'Analyze' to see a breakdown of sentiment, confidence scores, and key topics."),
                ui.tags.ul(
                    ui.tags.li("Compare sentiment across sources like social media or surveys."),
                    ui.tags.li("Identify key topics and keywords for each entry."),
                    ui.tags.li("View results in a filterable table with detailed explanations."),
                    style="text-align:left; display:inline-block;"
                ),
                style="text-align:center; padding:60px 20px; color:#475569;"
            )

        summary = reporting.summarize(state.results)
        most_common = summary["most_common"]
        pct = summary["percentages"]
        filter_choices = {reporting.ALL: "All"}
        filter_choices.update({s.value: s.value for s in Sentiment})

        return ui.div(
            ui.div(
                ui.h3("Analysis Summary", style="display:inline-block;"),
                ui.div(
                    ui.download_button("download_csv", "Export Results", class_="btn-info btn-sm"),
                    ui.download_button("download_json", "Download JSON", class_="btn-success btn-sm", style="margin-left:6px;"),
                    style="float:right;"
                ),
            ),
            ui.layout_columns(
                ui.div(ui.div("Total Inputs", class_="label"), ui.div(str(summary["total"]), class_="value"), class_="summary-card"),
                ui.div(
                    ui.div("Overall Sentiment", class_="label"),
                    ui.div(f"{SENTIMENT_EMOJI[most_common]} {most_common.value}", class_="value",
                           style=f"color:{reporting.SENTIMENT_COLORS[most_common]}; font-size:1.3em;"),
                    class_="summary-card"
                ),
                ui.div(ui.div("Avg. Confidence", class_="label"), ui.div(f"{summary['avg_confidence']:.1%}", class_="value"), class_="summary-card"),
                ui.div(
                    ui.div("Positive vs Negative", class_="label"),
                    ui.div(
                        ui.div(style=f"width:{pct[Sentiment.POSITIVE]:.1f}%; background:{reporting.SENTIMENT_COLORS[Sentiment.POSITIVE]};"),
                        ui.div(style=f"width:{pct[Sentiment.NEGATIVE]:.1f}%; background:{reporting.SENTIMENT_COLORS[Sentiment.NEGATIVE]};"),
                        class_="split-bar"
                    ),
                    class_="summary-card"
                ),
                col_widths=[3, 3, 3, 3]
            ),
            ui.br(),
            ui.layout_columns(
                ui.div(ui.h5("Sentiment Distribution"), ui.output_ui("distribution_chart")),
                ui.div(
                    ui.input_select("sentiment_filter", "Filter:", filter_choices, selected=reporting.ALL),
                    ui.output_ui("results_table")
                ),
                col_widths=[4, 8]
            )
        )

    @output
    @render.ui
    def distribution_chart():
        results = run_state.get().results
        fig_json = json.dumps(reporting.chart_spec(results))
        return ui.HTML(f"""
            <div id="sentiment_chart" style="width:100%;height:280px;"></div>
            <script>
                (function(){{
                    var spec = {fig_json};
                    if (window.Plotly && document.getElementById('sentiment_chart')) {{
                        Plotly.newPlot('sentiment_chart', spec.data, spec.layout, {{displayModeBar:false, responsive:true}});
                    }}
                }})();
            </script>
        """)

    @output
    @render.ui
    def results_table():
        results = run_state.get().results
        filtered = reporting.filter_results(results, input.sentiment_filter())

        header = ui.tags.tr(*[ui.tags.th(h) for h in ("Text Sample", "Source", "Sentiment", "Confidence", "Keywords", "Emotions", "Explanation")])
        rows = []
        for r in filtered:
            emotions = [ui.span(e, class_="pill") for e in r.emotions] or [ui.span("None detected", style="color:#64748b; font-size:0.8em;")]
            rows.append(ui.tags.tr(
                ui.tags.td(r.text, style="max-width:260px;"),
                ui.tags.td(r.source),
                ui.tags.td(ui.span(r.sentiment.value, class_="sentiment-badge",
                                   style=f"background:{reporting.SENTIMENT_COLORS[r.sentiment]};")),
                ui.tags.td(f"{r.confidence:.0%}"),
                ui.tags.td(", ".join(r.keywords)),
                ui.tags.td(*emotions),
                ui.tags.td(r.explanation, style="font-size:0.9em; color:#475569;"),
            ))
        return ui.div(
            ui.h5(f"Detailed Results ({len(filtered)})"),
            ui.tags.table(ui.tags.thead(header), ui.tags.tbody(*rows), class_="table table-sm table-hover"),
            style="max-height:520px; overflow-y:auto;"
        )

    # Export handlers
    @render.download(filename=reporting.CSV_FILENAME)
    def download_csv():
        yield reporting.to_csv(run_state.get().results)

    @render.download(filename=reporting.JSON_FILENAME)
    def download_json():
        yield reporting.to_json(run_state.get().results)


# Create app
app = App(app_ui, server)


if __name__ == "__main__":
    print("Run with: shiny run app.py")
    print("Make sure GEMINI_API_KEY is set in your .env file or environment.")
