#!/usr/bin/env python3
"""
Gradio Web UI for the Well Log Viewer.

Browse wells from the well service, plot up to three curves on a shared
depth axis with stable per-curve scales, overlay AI spike markers and cleaned
curves, and chat about the selected well.

Usage:
    python gradio_app.py                       # Launch on localhost:7860
    python gradio_app.py --share               # Generate public URL
    python gradio_app.py --port 8080           # Custom port
    python gradio_app.py --api-url http://host:5000/api
    python gradio_app.py --verbose             # Debug logging on the console
"""

import argparse
import os
import sys

import gradio as gr

import config
from data_ops.interpretation import CurveStats, InterpretationResult
from viewer.logging import current_log_path, get_logger, log_error, setup_logging
from viewer.session import CHAT_FAILED_TEXT, DATA, INTERPRET, ViewerSession


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------

def _session(session: ViewerSession | None) -> ViewerSession:
    """Return the tab's session, creating it on first use."""
    if session is None:
        session = ViewerSession()
        get_logger().info(f"New viewer session {session.session_id}")
    return session


def _well_choices(session: ViewerSession) -> list[tuple[str, str]]:
    return [(w.display_name, w.id) for w in session.wells]


def _fmt(value: float | None) -> str:
    return f"{value:.2f}" if value is not None else "-"


def format_interpretation(result: InterpretationResult | None) -> str:
    """Render the statistics panel as markdown."""
    if result is None:
        return ""
    parts = ["### Statistical Interpretation"]
    for curve, stats in result.stats.items():
        parts.append(_format_stats(curve, stats))
    parts.append(f"**Summary:**\n\n{result.summary_text}")
    return "\n\n".join(parts)


def _format_stats(curve: str, stats: CurveStats) -> str:
    return (
        f"#### {curve}\n"
        f"Median: {_fmt(stats.median)}  \n"
        f"Mean: {_fmt(stats.mean)}  \n"
        f"Std Dev: {_fmt(stats.std_dev)}  \n"
        f"Min: {_fmt(stats.min)}  \n"
        f"Max: {_fmt(stats.max)}"
    )


def _charts(session: ViewerSession) -> tuple:
    """Log figure, cleaned figure (hidden when absent) and stats markdown."""
    cleaned = session.cleaned_figure()
    return (
        session.log_figure(),
        gr.update(value=cleaned, visible=cleaned is not None),
        format_interpretation(session.interpretation),
    )


def _curve_controls(session: ViewerSession) -> dict:
    return gr.update(
        choices=session.available_curves,
        value=session.selection.names,
        visible=bool(session.available_curves),
    )


def _buttons(session: ViewerSession) -> tuple:
    """Load Data / AI Interpretation / Delete button states.

    A button stays disabled while its own request is still in flight.
    """
    return (
        gr.update(interactive=session.can_load_data and not session.is_pending(DATA)),
        gr.update(interactive=session.can_interpret and not session.is_pending(INTERPRET)),
        gr.update(visible=bool(session.well_id)),
    )


def _disable():
    return gr.update(interactive=False)


# ---------------------------------------------------------------------------
# Event handlers
# ---------------------------------------------------------------------------

def on_load(session):
    session = _session(session)
    try:
        session.load_wells()
    except Exception as e:
        log_error("Loading wells failed", e, {"session": session.session_id})
        gr.Warning("Failed to load wells")
    return session, gr.update(choices=_well_choices(session), value=None)


def on_well_change(well_id, session):
    session = _session(session)
    # Re-selecting the current well (e.g. after an upload refresh) keeps its state
    if (well_id or "") != session.well_id or not session.available_curves:
        try:
            session.select_well(well_id or "")
        except Exception as e:
            log_error("Loading curves failed", e, {"well": well_id})
            gr.Warning("Failed to load curves")
    placeholder = "Ask about this well..." if session.well_id else "Select a well first"
    return (
        session,
        _curve_controls(session),
        session.from_depth,
        session.to_depth,
        *_charts(session),
        *_buttons(session),
        gr.update(interactive=bool(session.well_id), placeholder=placeholder),
    )


def on_curves_change(checked, session):
    session = _session(session)
    session.sync_selection(checked or [])
    return (
        session,
        gr.update(value=session.selection.names),
        *_charts(session),
        *_buttons(session),
    )


def on_depth_change(from_depth, to_depth, session):
    session = _session(session)
    session.set_depth_range(from_depth or 0.0, to_depth or 0.0)
    return session


def on_load_data(session):
    session = _session(session)
    try:
        session.load_data()
    except Exception as e:
        log_error("Loading data failed", e, {
            "well": session.well_id,
            "curves": session.selection.names,
            "from": session.from_depth,
            "to": session.to_depth,
        })
        gr.Warning("Failed to load data")
    return (session, *_charts(session), *_buttons(session))


def on_interpret(session):
    session = _session(session)
    try:
        session.interpret()
    except Exception as e:
        log_error("AI interpretation failed", e, {
            "well": session.well_id,
            "curves": session.selection.names,
        })
        gr.Warning("AI interpretation failed")
    return (session, *_charts(session), *_buttons(session))


def on_chat(message, session):
    session = _session(session)
    try:
        session.chat(message or "")
    except Exception as e:
        log_error("Chat failed", e, {"well": session.well_id})
        session.add_chat_message("assistant", CHAT_FAILED_TEXT)
    return session, list(session.chat_history), ""


def on_upload(file_path, session):
    session = _session(session)
    if not file_path:
        return session, gr.skip(), gr.skip()
    try:
        session.upload(file_path)
    except Exception as e:
        log_error("Upload failed", e, {"file": os.path.basename(file_path)})
        gr.Warning("Upload failed")
        return session, gr.skip(), gr.skip()
    gr.Info("LAS file uploaded successfully")
    return session, gr.update(choices=_well_choices(session), value=session.well_id or None), None


def on_delete(session):
    session = _session(session)
    well_id = session.well_id
    if not well_id:
        return session, gr.skip()
    try:
        session.delete_well(well_id)
    except Exception as e:
        log_error("Delete failed", e, {"well": well_id})
        gr.Warning("Delete failed")
        return session, gr.skip()
    return session, gr.update(choices=_well_choices(session), value=session.well_id or None)


# ---------------------------------------------------------------------------
# Build the Gradio app
# ---------------------------------------------------------------------------

def create_app() -> gr.Blocks:
    """Build and return the Gradio Blocks application."""

    with gr.Blocks(title="Well Log Viewer") as app:
        session_state = gr.State(None)

        with gr.Row():
            # ---- Sidebar: well, curves, depth ----
            with gr.Column(scale=1, min_width=260):
                gr.Markdown("## Well Log Viewer")
                las_file = gr.File(
                    label="Upload LAS File",
                    file_types=[".las"],
                    type="filepath",
                )
                upload_btn = gr.Button("Upload File")
                well_dropdown = gr.Dropdown(
                    label="Well",
                    choices=[],
                    interactive=True,
                )
                delete_btn = gr.Button("Delete Selected Well", variant="stop", visible=False)
                curves_box = gr.CheckboxGroup(
                    label=f"Select Curves (min 1, max {config.MAX_CURVES})",
                    choices=[],
                    visible=False,
                    interactive=True,
                )
                from_depth = gr.Number(label="From Depth", value=0)
                to_depth = gr.Number(label="To Depth", value=0)
                load_btn = gr.Button("Load Data", variant="primary", interactive=False)
                interpret_btn = gr.Button("AI Interpretation", interactive=False)

            # ---- Main area: charts + interpretation ----
            with gr.Column(scale=3):
                log_plot = gr.Plot(label="Well Log Curves")
                cleaned_plot = gr.Plot(label="AI Cleaned Curves", visible=False)
                stats_md = gr.Markdown(value="")

            # ---- Right side: chat ----
            with gr.Column(scale=1, min_width=300):
                chatbot = gr.Chatbot(
                    height=520,
                    label="Well Chatbot",
                )
                chat_input = gr.Textbox(
                    placeholder="Select a well first",
                    show_label=False,
                    interactive=False,
                )
                send_btn = gr.Button("Send", variant="primary")

        # ---- Event wiring ----
        chart_outputs = [log_plot, cleaned_plot, stats_md]
        button_outputs = [load_btn, interpret_btn, delete_btn]

        app.load(
            fn=on_load,
            inputs=[session_state],
            outputs=[session_state, well_dropdown],
        )

        well_dropdown.change(
            fn=on_well_change,
            inputs=[well_dropdown, session_state],
            outputs=[session_state, curves_box, from_depth, to_depth,
                     *chart_outputs, *button_outputs, chat_input],
        )
        curves_box.input(
            fn=on_curves_change,
            inputs=[curves_box, session_state],
            outputs=[session_state, curves_box, *chart_outputs, *button_outputs],
        )
        for depth_input in (from_depth, to_depth):
            depth_input.change(
                fn=on_depth_change,
                inputs=[from_depth, to_depth, session_state],
                outputs=[session_state],
            )

        # Disable the triggering button while its request is in flight
        load_btn.click(fn=_disable, outputs=[load_btn]).then(
            fn=on_load_data,
            inputs=[session_state],
            outputs=[session_state, *chart_outputs, *button_outputs],
        )
        interpret_btn.click(fn=_disable, outputs=[interpret_btn]).then(
            fn=on_interpret,
            inputs=[session_state],
            outputs=[session_state, *chart_outputs, *button_outputs],
        )

        chat_args = dict(
            fn=on_chat,
            inputs=[chat_input, session_state],
            outputs=[session_state, chatbot, chat_input],
        )
        send_btn.click(**chat_args)
        chat_input.submit(**chat_args)

        upload_btn.click(fn=_disable, outputs=[upload_btn]).then(
            fn=on_upload,
            inputs=[las_file, session_state],
            outputs=[session_state, well_dropdown, las_file],
        ).then(fn=lambda: gr.update(interactive=True), outputs=[upload_btn])

        delete_btn.click(
            fn=on_delete,
            inputs=[session_state],
            outputs=[session_state, well_dropdown],
        )

    return app


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(description="Well Log Viewer — Gradio Web UI")
    parser.add_argument("--port", type=int, default=7860, help="Port to listen on")
    parser.add_argument("--share", action="store_true", help="Generate a public Gradio URL")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug logging on the console")
    parser.add_argument("--api-url", default=None, help="Well service base URL")
    args = parser.parse_args()

    if args.api_url:
        os.environ["WELLLOG_API_URL"] = args.api_url

    setup_logging(verbose=args.verbose)
    print(f"Well service: {config.get_api_base_url()}")
    print(f"Log file: {current_log_path()}")

    app = create_app()
    try:
        app.launch(
            server_port=args.port,
            share=args.share,
            show_error=True,
            theme=gr.themes.Soft(),
            css="""
            footer { display: none !important; }
            """,
        )
    except OSError as e:
        print(f"Error launching app: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
