#!/usr/bin/env python3
"""
Research Vibe Navigator

A single-page web interface that sends a research topic or abstract to
Gemini and renders the structured verdict.

Features:
  - Two input modes: generate an abstract from a topic, or evaluate an abstract
  - Fast-track mode for deadlines less than 2 months away
  - Objective trend match score and radar metrics
  - Methodology diagram (Mermaid), recommended venues with real papers
  - Execution roadmap

Usage:
  1. pip install -e .
  2. Create .env file with GEMINI_API_KEY=your_key
  3. python app.py
  4. Open http://localhost:5847
"""

import os
import uuid
import logging
import traceback
from dataclasses import asdict
from typing import Optional, Dict, Any

from flask import Flask, request, jsonify, Response
from dotenv import load_dotenv

from navigator import (
    AnalysisClient,
    AnalysisError,
    AnalysisSession,
    MODE_METADATA,
    MODEL_ID,
    MODEL_NAME,
    PROMPT_SUMMARY,
    SIMULATED_DATE,
    LOADING_STEPS,
    LOADING_STEP_INTERVAL_MS,
    build_view_model,
    get_mode,
)

# Load environment variables from .env file
load_dotenv()

# Configuration
API_KEY = os.environ.get("GEMINI_API_KEY", "")
if not API_KEY:
    print("Note: GEMINI_API_KEY not set. Analyses will fail until it is configured.")

logger = logging.getLogger(__name__)

# Application Initialization
app = Flask(__name__)

app.config['TEMPLATES_AUTO_RELOAD'] = True
app.config['SEND_FILE_MAX_AGE_DEFAULT'] = 0

# Gemini analysis client, created on first use
analysis_client: Optional[AnalysisClient] = None

# Page sessions: one view state machine per open page
sessions: Dict[str, AnalysisSession] = {}

# Upper bound on open sessions; the oldest idle ones are evicted first
MAX_SESSIONS = 200


def initialize_client() -> bool:
    """Initialize the analysis client with proper error handling."""
    global analysis_client
    try:
        analysis_client = AnalysisClient(api_key=API_KEY or None)
        return True
    except Exception as e:
        print(f"Failed to initialize Gemini client: {e}")
        return False


def get_analysis_client() -> Optional[AnalysisClient]:
    """Return the shared client, initializing it if needed."""
    if analysis_client is None:
        initialize_client()
    return analysis_client


def state_payload(session: AnalysisSession) -> Dict[str, Any]:
    """Serialize a session's state plus the result view model, if any."""
    state = session.state
    payload = state.to_dict()
    payload["view_model"] = (
        build_view_model(state.result, state.last_input) if state.result is not None else None
    )
    return payload


def evict_idle_sessions(limit: int) -> None:
    """Drop the oldest non-busy sessions until there is room for one more."""
    for session_id in list(sessions):
        if len(sessions) < limit:
            break
        if not sessions[session_id].is_busy:
            del sessions[session_id]
            logger.info(f"Evicted idle session {session_id}")


def get_session_or_error(session_id: Optional[str]):
    """Look up a session. Returns (session, None) or (None, error_response)."""
    if not session_id:
        return None, (jsonify({"success": False, "error": "No session_id provided"}), 400)
    session = sessions.get(session_id)
    if session is None:
        return None, (jsonify({"success": False, "error": "Unknown session. Reload the page."}), 404)
    return session, None


# API Endpoints

@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "client_initialized": analysis_client is not None,
        "model": MODEL_ID
    })


@app.route('/api/config', methods=['GET'])
def get_config():
    """Return static page configuration: modes, loading text, prompt summary."""
    return jsonify({
        "modes": {key: asdict(meta) for key, meta in MODE_METADATA.items()},
        "loading_steps": LOADING_STEPS,
        "loading_interval_ms": LOADING_STEP_INTERVAL_MS,
        "simulated_date": SIMULATED_DATE,
        "model": {"id": MODEL_ID, "name": MODEL_NAME},
        "prompt_summary": PROMPT_SUMMARY
    })


@app.route('/api/session/new', methods=['POST'])
def create_session():
    """Create a new page session in the input view."""
    client = get_analysis_client()
    if client is None:
        return jsonify({
            "success": False,
            "error": "Gemini client not initialized. Check GEMINI_API_KEY."
        }), 503

    evict_idle_sessions(MAX_SESSIONS)
    session_id = str(uuid.uuid4())
    sessions[session_id] = AnalysisSession(client)
    logger.info(f"Created session {session_id} ({len(sessions)} open)")
    return jsonify({
        "success": True,
        "session_id": session_id,
        "state": state_payload(sessions[session_id])
    })


@app.route('/api/session/clear', methods=['POST'])
def clear_session():
    """
    Drop an existing page session.

    Also the target of the page's sendBeacon on pagehide, which posts the
    JSON body as text/plain, so the body is parsed regardless of content type.
    """
    data = request.get_json(force=True, silent=True) or {}
    session_id = data.get('session_id')

    if session_id and sessions.pop(session_id, None) is not None:
        logger.info(f"Cleared session {session_id}")

    return jsonify({"success": True})


@app.route('/api/state', methods=['GET'])
def get_state():
    """Return the current state of a page session."""
    session, error = get_session_or_error(request.args.get('session_id'))
    if error:
        return error
    return jsonify({"success": True, "state": state_payload(session)})


@app.route('/api/analyze', methods=['POST'])
async def analyze():
    """
    Submit a topic or abstract for analysis.

    Request body:
    {
        "session_id": "uuid from /api/session/new",
        "input": "Efficient LLM Inference",
        "mode": "idea",
        "fast_track": false
    }
    """
    data = request.json or {}

    session, error = get_session_or_error(data.get('session_id'))
    if error:
        return error

    user_input = data.get('input') or ''
    if not isinstance(user_input, str) or not user_input.strip():
        return jsonify({"success": False, "error": "Please enter a topic or abstract"}), 400

    mode = data.get('mode', 'idea')
    try:
        mode = get_mode(mode)
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400

    fast_track = bool(data.get('fast_track', False))

    if session.is_busy:
        return jsonify({
            "success": False,
            "accepted": False,
            "error": "An analysis is already running",
            "state": state_payload(session)
        }), 409

    try:
        accepted = await session.submit(user_input, mode, fast_track)
    except Exception:
        traceback.print_exc()
        return jsonify({"success": False, "error": AnalysisError.USER_MESSAGE}), 500

    if not accepted:
        return jsonify({
            "success": False,
            "accepted": False,
            "error": "Submission refused. Start over to analyze new input.",
            "state": state_payload(session)
        }), 409

    state = session.state
    return jsonify({
        "success": state.error is None,
        "accepted": True,
        "error": state.error,
        "state": state_payload(session)
    })


@app.route('/api/reset', methods=['POST'])
def reset():
    """Return a session to the input view."""
    data = request.json or {}
    session, error = get_session_or_error(data.get('session_id'))
    if error:
        return error
    session.reset()
    return jsonify({"success": True, "state": state_payload(session)})


# Main Page

@app.route('/')
def index():
    """Serve the main application page."""
    return Response(HTML_PAGE, mimetype='text/html')


# Embedded HTML/CSS/JS

HTML_PAGE = '''<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Research Vibe Navigator</title>
    <link href="https://fonts.googleapis.com/css2?family=Libre+Baskerville:ital,wght@0,400;0,700;1,400&family=Inter:wght@400;500;600&display=swap" rel="stylesheet">
    <style>
        :root {
            --bg-page: #f8fafc;
            --bg-card: #ffffff;
            --bg-input: #f1f5f9;
            --bg-hover: #e2e8f0;
            --primary: #4f46e5;
            --primary-soft: #eef2ff;
            --rose: #e11d48;
            --success: #2d7d46;
            --error: #b33a3a;
            --error-soft: #fef2f2;
            --text: #0f172a;
            --text-secondary: #475569;
            --text-muted: #94a3b8;
            --border: #e2e8f0;
            --border-dark: #cbd5e1;
            --radius: 12px;
            --shadow: 0 1px 3px rgba(0,0,0,0.08);
        }

        * { margin: 0; padding: 0; box-sizing: border-box; }

        body {
            font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
            background: var(--bg-page);
            color: var(--text);
            min-height: 100vh;
            line-height: 1.6;
            font-size: 15px;
        }

        .app {
            max-width: 1000px;
            margin: 0 auto;
            padding: 0 1.5rem 3rem;
        }

        header {
            display: flex;
            justify-content: space-between;
            align-items: center;
            padding: 1rem 0;
            border-bottom: 1px solid var(--border);
            margin-bottom: 2rem;
        }

        header .brand {
            display: flex;
            align-items: center;
            gap: 0.5rem;
            cursor: pointer;
        }

        header .logo {
            width: 32px;
            height: 32px;
            background: var(--primary);
            color: #fff;
            border-radius: 8px;
            display: flex;
            align-items: center;
            justify-content: center;
            font-weight: 700;
        }

        header h1 {
            font-family: 'Libre Baskerville', Georgia, serif;
            font-size: 1.25rem;
            font-weight: 700;
        }

        .badge {
            font-size: 0.7rem;
            font-weight: 600;
            padding: 0.2rem 0.5rem;
            border-radius: 6px;
            border: 1px solid var(--border);
            background: var(--bg-input);
            color: var(--text-secondary);
            margin-left: 0.4rem;
        }

        .badge.model {
            color: var(--primary);
            background: var(--primary-soft);
        }

        .intro {
            text-align: center;
            max-width: 640px;
            margin: 0 auto 2rem;
        }

        .intro h2 {
            font-family: 'Libre Baskerville', Georgia, serif;
            font-size: 1.9rem;
            margin-bottom: 0.75rem;
        }

        .intro p { color: var(--text-secondary); font-size: 1.05rem; }

        .card {
            background: var(--bg-card);
            border: 1px solid var(--border);
            border-radius: var(--radius);
            box-shadow: var(--shadow);
            padding: 1.5rem;
            margin-bottom: 1.5rem;
        }

        .card h3 {
            font-size: 1.05rem;
            margin-bottom: 0.75rem;
        }

        .label {
            font-size: 0.7rem;
            font-weight: 700;
            text-transform: uppercase;
            letter-spacing: 0.1em;
            color: var(--text-muted);
            margin-bottom: 0.4rem;
        }

        /* Mode tabs */
        .mode-tabs {
            display: flex;
            border-bottom: 1px solid var(--border);
            margin: -1.5rem -1.5rem 1.5rem;
        }

        .mode-tab {
            flex: 1;
            padding: 1rem;
            background: none;
            border: none;
            border-bottom: 2px solid transparent;
            font-weight: 600;
            color: var(--text-secondary);
            cursor: pointer;
        }

        .mode-tab.active {
            background: var(--primary-soft);
            color: var(--primary);
            border-bottom-color: var(--primary);
        }

        textarea {
            width: 100%;
            height: 12rem;
            padding: 1rem;
            border: 1px solid var(--border-dark);
            border-radius: var(--radius);
            font: inherit;
            resize: none;
            margin-bottom: 1rem;
        }

        textarea:focus { outline: 2px solid var(--primary-soft); border-color: var(--primary); }

        .form-row {
            display: flex;
            flex-wrap: wrap;
            justify-content: space-between;
            align-items: center;
            gap: 1rem;
        }

        .fast-track { display: flex; align-items: center; gap: 0.5rem; cursor: pointer; }
        .fast-track.on span { color: var(--rose); }

        .btn-primary {
            min-width: 220px;
            padding: 0.75rem 2rem;
            border: none;
            border-radius: 8px;
            background: var(--primary);
            color: #fff;
            font-weight: 600;
            cursor: pointer;
        }

        .btn-primary:disabled { background: var(--border-dark); cursor: not-allowed; }

        .btn-link {
            background: none;
            border: none;
            color: var(--text-secondary);
            cursor: pointer;
            font-size: 0.85rem;
        }

        .btn-link:hover { color: var(--primary); }

        .progress {
            height: 4px;
            background: var(--bg-input);
            border-radius: 2px;
            overflow: hidden;
            margin-top: 1rem;
            display: none;
        }

        .progress.active { display: block; }

        .progress div {
            height: 100%;
            background: var(--primary);
            animation: progress-indeterminate 2s infinite ease-in-out;
        }

        @keyframes progress-indeterminate {
            0% { width: 0%; margin-left: 0%; }
            50% { width: 70%; margin-left: 30%; }
            100% { width: 0%; margin-left: 100%; }
        }

        .error-banner {
            display: none;
            background: var(--error-soft);
            color: var(--error);
            border: 1px solid #fecaca;
            border-radius: var(--radius);
            padding: 1rem;
        }

        .error-banner.active { display: block; }

        /* Result layout */
        .input-echo {
            border-left: 4px solid var(--primary);
            background: var(--primary-soft);
        }

        .input-echo p {
            font-family: 'Libre Baskerville', Georgia, serif;
            font-size: 1.1rem;
        }

        .prompt-panel {
            display: none;
            background: #0f172a;
            color: #cbd5e1;
            font-family: monospace;
            font-size: 0.8rem;
            padding: 1rem;
            border-radius: var(--radius);
            margin-bottom: 1.5rem;
        }

        .prompt-panel.active { display: block; }

        .grid { display: grid; grid-template-columns: 2fr 1fr; gap: 1.5rem; }
        .grid-even { display: grid; grid-template-columns: 1fr 1fr; gap: 1.5rem; }

        @media (max-width: 760px) {
            .grid, .grid-even { grid-template-columns: 1fr; }
        }

        .keyword {
            display: inline-block;
            padding: 0.2rem 0.75rem;
            margin: 0 0.4rem 0.4rem 0;
            background: var(--bg-input);
            border: 1px solid var(--border);
            border-radius: 999px;
            font-size: 0.85rem;
        }

        .score-card {
            background: linear-gradient(135deg, #1e293b, #0f172a);
            color: #fff;
            text-align: center;
            display: flex;
            flex-direction: column;
            justify-content: center;
        }

        .score-card .score { font-size: 3rem; font-weight: 700; }
        .score-card .badge-emoji { font-size: 1.8rem; }

        .mermaid-box {
            background: var(--bg-page);
            border: 1px solid var(--border);
            border-radius: var(--radius);
            padding: 1rem;
            overflow-x: auto;
            text-align: center;
        }

        .conf-tabs { display: flex; flex-wrap: wrap; gap: 0.25rem; background: var(--bg-input); padding: 0.25rem; border-radius: 8px; margin-bottom: 1rem; }
        .conf-tab { border: none; background: none; padding: 0.4rem 0.9rem; border-radius: 6px; cursor: pointer; color: var(--text-secondary); font-weight: 500; }
        .conf-tab.active { background: #fff; color: var(--primary); box-shadow: var(--shadow); }

        .conf-header { display: flex; justify-content: space-between; align-items: flex-start; gap: 1rem; margin-bottom: 1rem; }

        .btn-visit {
            padding: 0.5rem 1rem;
            background: var(--primary);
            color: #fff;
            border-radius: 8px;
            text-decoration: none;
            font-size: 0.85rem;
            white-space: nowrap;
        }

        .paper { border: 1px solid var(--border); border-radius: var(--radius); margin-bottom: 0.75rem; overflow: hidden; }
        .paper-head { width: 100%; text-align: left; background: #fff; border: none; padding: 1rem; cursor: pointer; font: inherit; }
        .paper-head:hover { background: var(--bg-page); }
        .paper-head .year { color: var(--text-muted); font-size: 0.85rem; }
        .paper-head .teaser { color: var(--text-secondary); font-size: 0.85rem; white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }
        .paper-body { display: none; padding: 0 1rem 1rem; border-top: 1px solid var(--border); }
        .paper.open .paper-body { display: block; }
        .paper.open .teaser { display: none; }
        .paper-links { display: flex; gap: 0.75rem; margin-top: 0.75rem; }
        .paper-links a { font-size: 0.8rem; padding: 0.3rem 0.75rem; border-radius: 6px; text-decoration: none; }
        .paper-links .scholar { background: var(--primary); color: #fff; }
        .paper-links .github { background: var(--bg-input); color: var(--text); border: 1px solid var(--border); }

        .timeline { position: relative; padding-left: 1.5rem; }
        .timeline::before { content: ''; position: absolute; left: 6px; top: 0.4rem; bottom: 0.4rem; width: 2px; background: var(--border); }
        .step { position: relative; margin-bottom: 1.5rem; }
        .step::before { content: ''; position: absolute; left: -1.5rem; top: 0.4rem; width: 14px; height: 14px; border-radius: 50%; border: 2px solid var(--primary); background: #fff; }
        .step-head { display: flex; justify-content: space-between; gap: 0.5rem; flex-wrap: wrap; }
        .step-time { font-size: 0.75rem; font-weight: 600; color: var(--primary); background: var(--primary-soft); padding: 0.1rem 0.5rem; border-radius: 6px; }

        .invalid-card { text-align: center; background: var(--error-soft); border-color: #fecaca; max-width: 640px; margin: 2rem auto; }
        .invalid-card .echo { background: #fff; border: 1px solid var(--border); border-radius: var(--radius); padding: 1rem; text-align: left; margin: 1rem 0; font-style: italic; }
        .btn-danger { padding: 0.75rem 1.5rem; background: var(--error); color: #fff; border: none; border-radius: 8px; cursor: pointer; }

        footer { text-align: center; color: var(--text-muted); font-size: 0.85rem; border-top: 1px solid var(--border); padding-top: 2rem; margin-top: 2rem; }

        .hidden { display: none !important; }
    </style>
    <script src="https://cdn.jsdelivr.net/npm/mermaid@10/dist/mermaid.min.js"></script>
    <script src="https://cdn.jsdelivr.net/npm/chart.js@4"></script>
</head>
<body>
    <div class="app">
        <header>
            <div class="brand" onclick="resetAnalysis()">
                <div class="logo">V</div>
                <h1>Research Vibe Navigator</h1>
            </div>
            <div>
                <span class="badge" id="date-badge">Simulating Dec 2025</span>
                <span class="badge model" id="model-badge"></span>
            </div>
        </header>

        <!-- Input View -->
        <section id="input-view">
            <div class="intro">
                <h2>Your AI Research Strategist</h2>
                <p>Design your next SOTA paper.<br>Check trend vibes, find conferences, and plan your deadline strategy.</p>
            </div>

            <div class="card">
                <div class="mode-tabs" id="mode-tabs"></div>
                <h3 id="mode-heading"></h3>
                <p class="label" id="mode-description" style="text-transform: none; letter-spacing: 0; font-weight: 400;"></p>

                <form id="analyze-form" onsubmit="submitAnalysis(event)">
                    <textarea id="user-input" oninput="updateSubmitState()"></textarea>
                    <div class="form-row">
                        <label class="fast-track" id="fast-track-label">
                            <input type="checkbox" id="fast-track" onchange="toggleFastTrack()">
                            <span>&#128640; Apply Fast <small>(Deadline &lt; 2 months)</small></span>
                        </label>
                        <button type="submit" class="btn-primary" id="submit-btn" disabled>Analyze Vibe &#128270;</button>
                    </div>
                    <div class="progress" id="progress"><div></div></div>
                </form>
            </div>

            <div class="error-banner" id="error-banner">
                <strong>Analysis Error</strong>
                <p id="error-text"></p>
            </div>
        </section>

        <!-- Result View -->
        <section id="result-view" class="hidden"></section>

        <footer>
            <p>&copy; <span id="year"></span> Research Vibe Navigator. Powered by Google Gemini.</p>
        </footer>
    </div>

    <script>
        // State
        let sessionId = null;
        let pageConfig = null;
        let currentMode = 'idea';
        let isLoading = false;
        let loadingTimer = null;
        let activeConference = 0;
        let radarChart = null;

        function $(id) { return document.getElementById(id); }

        function escapeHtml(text) {
            const div = document.createElement('div');
            div.textContent = text || '';
            return div.innerHTML.replace(/"/g, '&quot;').replace(/'/g, '&#39;');
        }

        function isHttpUrl(url) {
            if (typeof url !== 'string') return false;
            var lower = url.toLowerCase();
            return lower.indexOf('http://') === 0 || lower.indexOf('https://') === 0;
        }

        // ==================== SETUP ====================

        async function loadConfig() {
            const res = await fetch('/api/config');
            pageConfig = await res.json();
            $('model-badge').textContent = pageConfig.model.name;
            renderModeTabs();
        }

        async function createSession() {
            const res = await fetch('/api/session/new', { method: 'POST' });
            const data = await res.json();
            if (!data.success) {
                showError(data.error);
                return;
            }
            sessionId = data.session_id;
            applyState(data.state);
        }

        // ==================== INPUT VIEW ====================

        function renderModeTabs() {
            var tabs = $('mode-tabs');
            tabs.innerHTML = '';
            Object.keys(pageConfig.modes).forEach(function(key) {
                var meta = pageConfig.modes[key];
                var btn = document.createElement('button');
                btn.type = 'button';
                btn.className = 'mode-tab' + (key === currentMode ? ' active' : '');
                btn.textContent = meta.icon + ' ' + meta.label;
                btn.disabled = isLoading;
                btn.onclick = function() { setMode(key); };
                tabs.appendChild(btn);
            });
            var current = pageConfig.modes[currentMode];
            $('mode-heading').textContent = current.heading;
            $('mode-description').textContent = current.description;
            $('user-input').placeholder = current.placeholder;
        }

        function setMode(mode) {
            currentMode = mode;
            renderModeTabs();
        }

        function toggleFastTrack() {
            $('fast-track-label').classList.toggle('on', $('fast-track').checked);
        }

        function updateSubmitState() {
            $('submit-btn').disabled = isLoading || !$('user-input').value.trim();
        }

        function setLoading(loading) {
            isLoading = loading;
            $('user-input').disabled = loading;
            $('fast-track').disabled = loading;
            $('progress').classList.toggle('active', loading);
            renderModeTabs();
            updateSubmitState();

            clearInterval(loadingTimer);
            var btn = $('submit-btn');
            if (loading) {
                var step = 0;
                btn.textContent = pageConfig.loading_steps[0];
                loadingTimer = setInterval(function() {
                    step = (step + 1) % pageConfig.loading_steps.length;
                    btn.textContent = pageConfig.loading_steps[step];
                }, pageConfig.loading_interval_ms);
            } else {
                btn.innerHTML = 'Analyze Vibe &#128270;';
            }
        }

        function showError(message) {
            $('error-text').textContent = message || '';
            $('error-banner').classList.toggle('active', !!message);
        }

        async function submitAnalysis(event) {
            event.preventDefault();
            var input = $('user-input').value;
            if (!input.trim() || isLoading || !sessionId) {
                return;
            }

            showError(null);
            setLoading(true);

            try {
                var response = await fetch('/api/analyze', {
                    method: 'POST',
                    headers: { 'Content-Type': 'application/json' },
                    body: JSON.stringify({
                        session_id: sessionId,
                        input: input,
                        mode: currentMode,
                        fast_track: $('fast-track').checked
                    })
                });
                var data = await response.json();
                if (data.state) {
                    applyState(data.state);
                } else {
                    setLoading(false);
                    showError(data.error);
                }
            } catch (err) {
                console.error('Analysis request failed:', err);
                setLoading(false);
                showError('Analysis failed. Please try again.');
            }
        }

        async function resetAnalysis() {
            if (!sessionId) {
                return;
            }
            var response = await fetch('/api/reset', {
                method: 'POST',
                headers: { 'Content-Type': 'application/json' },
                body: JSON.stringify({ session_id: sessionId })
            });
            var data = await response.json();
            if (data.state) {
                applyState(data.state);
            }
        }

        // ==================== STATE ====================

        function applyState(state) {
            setLoading(state.is_loading);
            showError(state.error);
            if (state.last_input && !$('user-input').value) {
                $('user-input').value = state.last_input;
                updateSubmitState();
            }

            var showResult = state.view === 'result' && state.view_model;
            $('input-view').classList.toggle('hidden', showResult);
            $('result-view').classList.toggle('hidden', !showResult);

            if (showResult) {
                renderResult(state.view_model);
            } else {
                $('result-view').innerHTML = '';
            }
            window.scrollTo(0, 0);
        }

        // ==================== RESULT VIEW ====================

        function renderResult(vm) {
            if (vm.layout === 'invalid') {
                renderInvalid(vm);
                return;
            }
            activeConference = 0;

            var html = '';
            html += '<div class="form-row" style="margin-bottom: 1rem;">';
            html += '<button class="btn-link" onclick="resetAnalysis()">&larr; Start Over</button>';
            html += '<button class="btn-link" id="prompt-toggle" onclick="togglePrompt()">Show Prompt Used &#8505;&#65039;</button>';
            html += '</div>';

            html += '<div class="prompt-panel" id="prompt-panel">';
            html += '<p>// System Prompt Configuration</p>';
            html += '<p>Role: "' + escapeHtml(pageConfig.prompt_summary.role) + '"</p>';
            html += '<p>Simulated Date: ' + escapeHtml(pageConfig.prompt_summary.simulated_date) + '</p>';
            html += '<p>Grading: ' + escapeHtml(pageConfig.prompt_summary.grading) + '</p>';
            html += '<p>Validation: ' + escapeHtml(pageConfig.prompt_summary.validation) + '</p>';
            html += '</div>';

            html += '<div class="card input-echo"><div class="label">Your Research Input</div>';
            html += '<p>"' + escapeHtml(vm.userInput) + '"</p></div>';

            if (vm.generatedAbstract) {
                html += '<div class="card"><h3>&#128161; Generated Research Idea</h3>';
                html += '<p style="font-family: Libre Baskerville, Georgia, serif;">' + escapeHtml(vm.generatedAbstract) + '</p></div>';
            }

            html += '<div class="grid">';
            html += '<div class="card"><div class="label">Extracted Keywords</div><div>';
            vm.keywords.forEach(function(kw) {
                html += '<span class="keyword">#' + escapeHtml(kw) + '</span>';
            });
            html += '</div><div class="label" style="margin-top: 1rem;">One-Liner Insight</div>';
            html += '<p style="font-size: 1.1rem; font-weight: 500;">"' + escapeHtml(vm.oneLiner) + '"</p></div>';
            html += '<div class="card score-card"><span class="badge-emoji">' + vm.scoreBadge + '</span>';
            html += '<div class="score" id="score-text">' + escapeHtml(vm.scoreText) + '</div>';
            html += '<p>Objective Vibe Score</p></div>';
            html += '</div>';

            html += '<div class="card"><h3>&#129513; Proposed Methodology</h3>';
            html += '<p style="color: var(--text-secondary); margin-bottom: 1rem;">' + escapeHtml(vm.methodology.description) + '</p>';
            html += '<div class="mermaid-box"><div class="mermaid" id="mermaid-diagram"></div></div></div>';

            html += '<div class="card"><h3>&#127919; Recommended Conferences</h3>';
            html += '<div class="conf-tabs" id="conf-tabs"></div><div id="conf-body"></div></div>';

            html += '<div class="grid-even">';
            html += '<div class="card"><h3>&#128202; Visual Analysis</h3><canvas id="radar-chart" height="300"></canvas></div>';
            html += '<div class="card"><h3>&#128640; Roadmap (Dec &#39;25 Start)</h3><div class="timeline">';
            vm.roadmap.forEach(function(step) {
                html += '<div class="step"><div class="step-head"><strong>' + escapeHtml(step.phase) + '</strong>';
                html += '<span class="step-time">' + escapeHtml(step.timeline) + '</span></div>';
                html += '<p style="color: var(--text-secondary); font-size: 0.9rem;">' + escapeHtml(step.description) + '</p></div>';
            });
            html += '</div></div></div>';

            $('result-view').innerHTML = html;
            window.currentViewModel = vm;

            renderConferences(vm.conferences);
            renderMermaid(vm.methodology.mermaidCode);
            renderRadar(vm.metrics);
        }

        function renderInvalid(vm) {
            var html = '<div class="card invalid-card">';
            html += '<div style="font-size: 2rem;">&#9888;&#65039;</div>';
            html += '<h3>Input Needs Revision</h3>';
            html += '<p id="invalid-feedback">' + escapeHtml(vm.feedback) + '</p>';
            html += '<div class="echo"><div class="label">You entered:</div>"' + escapeHtml(vm.userInput) + '"</div>';
            html += '<button class="btn-danger" onclick="resetAnalysis()">Try Again</button>';
            html += '</div>';
            $('result-view').innerHTML = html;
        }

        function togglePrompt() {
            var panel = $('prompt-panel');
            var open = panel.classList.toggle('active');
            $('prompt-toggle').innerHTML = (open ? 'Hide System Prompt' : 'Show Prompt Used') + ' &#8505;&#65039;';
        }

        function renderConferences(conferences) {
            var tabs = $('conf-tabs');
            tabs.innerHTML = '';
            conferences.forEach(function(conf, idx) {
                var btn = document.createElement('button');
                btn.className = 'conf-tab' + (idx === activeConference ? ' active' : '');
                btn.textContent = conf.name;
                btn.onclick = function() {
                    activeConference = idx;
                    renderConferences(conferences);
                };
                tabs.appendChild(btn);
            });

            var conf = conferences[activeConference];
            if (!conf) {
                $('conf-body').innerHTML = '';
                return;
            }

            var html = '<div class="conf-header"><div><h3>' + escapeHtml(conf.name) + '</h3>';
            html += '<p style="color: var(--text-secondary); font-size: 0.9rem;">' + escapeHtml(conf.reason) + '</p></div>';
            if (isHttpUrl(conf.url)) {
                html += '<a class="btn-visit" target="_blank" rel="noreferrer" href="' + escapeHtml(conf.url) + '">Visit Website &#8599;</a>';
            }
            html += '</div>';
            html += '<div class="label">&#128218; Relevant Papers for ' + escapeHtml(conf.name) + '</div>';

            conf.relevantPapers.forEach(function(paper) {
                html += '<div class="paper">';
                html += '<button class="paper-head" onclick="this.parentElement.classList.toggle(&#39;open&#39;)">';
                html += '<strong>' + escapeHtml(paper.title) + '</strong> <span class="year">(' + paper.year + ')</span>';
                html += '<div class="teaser">' + escapeHtml(paper.oneLiner) + '</div></button>';
                html += '<div class="paper-body">';
                html += '<div class="label" style="margin-top: 0.75rem; color: var(--primary);">Key Insight</div><p>' + escapeHtml(paper.oneLiner) + '</p>';
                html += '<div class="label" style="margin-top: 0.75rem;">Abstract</div><p style="color: var(--text-secondary); font-size: 0.9rem;">' + escapeHtml(paper.abstract) + '</p>';
                html += '<div class="paper-links">';
                html += '<a class="scholar" target="_blank" rel="noreferrer" href="' + escapeHtml(paper.scholarUrl) + '">Find on Google Scholar</a>';
                if (paper.githubUrl) {
                    html += '<a class="github" target="_blank" rel="noreferrer" href="' + escapeHtml(paper.githubUrl) + '">' + escapeHtml(paper.github) + '</a>';
                }
                html += '</div></div></div>';
            });

            $('conf-body').innerHTML = html;
        }

        // Re-run Mermaid whenever the diagram source changes
        function renderMermaid(code) {
            var el = $('mermaid-diagram');
            if (!el || !code) {
                return;
            }
            el.textContent = code;
            el.removeAttribute('data-processed');
            if (window.mermaid) {
                window.mermaid.run({ querySelector: '.mermaid' }).catch(function(err) {
                    console.error('Mermaid render failed:', err);
                });
            }
        }

        function renderRadar(metrics) {
            if (radarChart) {
                radarChart.destroy();
                radarChart = null;
            }
            if (!window.Chart || !metrics.length) {
                return;
            }
            radarChart = new Chart($('radar-chart'), {
                type: 'radar',
                data: {
                    labels: metrics.map(function(m) { return m.metric; }),
                    datasets: [{
                        label: 'Vibe Score',
                        data: metrics.map(function(m) { return m.value; }),
                        borderColor: '#4f46e5',
                        borderWidth: 3,
                        backgroundColor: 'rgba(99, 102, 241, 0.4)'
                    }]
                },
                options: {
                    plugins: { legend: { display: false } },
                    scales: { r: { min: 0, max: 100, ticks: { display: false } } }
                }
            });
        }

        document.addEventListener('DOMContentLoaded', async function() {
            $('year').textContent = new Date().getFullYear();
            if (window.mermaid) {
                window.mermaid.initialize({ startOnLoad: false, theme: 'default' });
            }
            await loadConfig();
            await createSession();
        });

        window.addEventListener('pagehide', function() {
            if (!sessionId) return;
            navigator.sendBeacon('/api/session/clear', JSON.stringify({ session_id: sessionId }));
            sessionId = null;
        });

        window.addEventListener('pageshow', function(event) {
            if (event.persisted && !sessionId) createSession();
        });
    </script>
</body>
</html>
'''


if __name__ == '__main__':
    PORT = int(os.environ.get('PORT', 5847))
    DEBUG = os.environ.get('DEBUG', 'true').lower() in ('true', '1', 'yes')
    ENVIRONMENT = os.environ.get('ENVIRONMENT', 'development')

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Print startup banner
    print()
    print("=" * 65)
    print("  RESEARCH VIBE NAVIGATOR")
    print("=" * 65)
    print()
    print(f"  Environment      : {ENVIRONMENT}")
    print(f"  Model            : {MODEL_NAME} ({MODEL_ID})")
    print(f"  Simulated date   : {SIMULATED_DATE}")
    print(f"  Gemini API Key   : {'Set' if API_KEY else 'Not set'}")
    print()
    print("=" * 65)
    print(f"  Starting server at: http://localhost:{PORT}")
    print(f"  Debug mode       : {'ON' if DEBUG else 'OFF'}")
    print("  Press Ctrl+C to stop")
    print("=" * 65)
    print()

    if API_KEY:
        if initialize_client():
            print("  Gemini client initialized successfully")
        else:
            print("  Client initialization deferred to first request")

    print()

    app.run(
        host='0.0.0.0',
        port=PORT,
        debug=DEBUG,
        use_reloader=DEBUG,
        threaded=True
    )
