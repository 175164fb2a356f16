# File: pluginforge/transformers/figma_templates.py
"""Named templates for the Figma plugin bundle."""

from __future__ import annotations

from typing import List

from pluginforge.templates import NamedTemplate, TemplateRegistry

CODE_JS: NamedTemplate = NamedTemplate(
    "figma.code_js",
    r"""// Main thread for @@api_name Figma Plugin

figma.showUI(__html__, { width: 420, height: 560 });

// Relay settings between UI and main via clientStorage
figma.ui.onmessage = async (msg) => {
  if (msg.type === 'get-settings') {
    const baseUrl = await figma.clientStorage.getAsync('api_base_url');
    const apiKey = await figma.clientStorage.getAsync('api_key');
    figma.ui.postMessage({ type: 'settings', baseUrl, apiKey });
  } else if (msg.type === 'set-settings') {
    await figma.clientStorage.setAsync('api_base_url', msg.baseUrl || '');
    await figma.clientStorage.setAsync('api_key', msg.apiKey || '');
    figma.notify('Settings saved');
  } else if (msg.type === 'apply-to-selection') {
    const text = String(msg.text || '');
    let applied = 0;
    for (const node of figma.currentPage.selection) {
      if (node.type === 'TEXT') {
        await figma.loadFontAsync(node.fontName);
        node.characters = text;
        applied++;
      }
    }
    figma.notify(applied ? 'Applied to ' + applied + ' text node(s)' : 'No text nodes selected');
  }
};
""",
    ["api_name"],
)

UI_HTML: NamedTemplate = NamedTemplate(
    "figma.ui_html",
    r"""<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>@@api_name Plugin UI</title>
  <link rel="stylesheet" href="styles.css" />
</head>
<body>
  <header>
    <h1>@@api_name Plugin</h1>
    <p class="muted">@@description</p>
  </header>
  <main>
    <section class="card">
      <h2>Settings</h2>
@@settings_fields
      <div class="row">
        <button id="saveSettings">Save</button>
        <button id="loadSettings" class="secondary">Reload</button>
      </div>
    </section>

    <section class="card">
      <h2>Endpoint Runner</h2>
      <label>
        <span>Endpoint</span>
        <select id="endpointSelect"></select>
      </label>
      <div id="fields"></div>
      <div class="row">
        <button id="run">Run</button>
@@apply_button
      </div>
      <pre id="result" class="result"></pre>
    </section>
  </main>

  <script>
    const ENDPOINTS = @@endpoints_json;
    const DEFAULTS = @@defaults_json;

    const endpointSelect = document.getElementById('endpointSelect');
    const fieldsBox = document.getElementById('fields');
    const resultPre = document.getElementById('result');
    const setting = (name) => document.getElementById('setting_' + name);

    function renderFields() {
      const e = ENDPOINTS[Number(endpointSelect.value)];
      fieldsBox.innerHTML = '';
      if (!e) return;
      e.fields.forEach((f) => {
        const label = document.createElement('label');
        const span = document.createElement('span');
        span.textContent = f.label + (f.required ? ' *' : '');
        const input = document.createElement(f.type === 'textarea' ? 'textarea' : 'input');
        if (f.type === 'checkbox') input.type = 'checkbox';
        else if (f.type === 'number') input.type = 'number';
        input.dataset.name = f.name;
        label.appendChild(span);
        label.appendChild(input);
        fieldsBox.appendChild(label);
      });
    }

    ENDPOINTS.forEach((e, i) => {
      const opt = document.createElement('option');
      opt.value = String(i);
      opt.textContent = '[' + e.method + '] ' + e.label;
      endpointSelect.appendChild(opt);
    });
    endpointSelect.addEventListener('change', renderFields);
    renderFields();

    window.parent.postMessage({ pluginMessage: { type: 'get-settings' } }, '*');
    onmessage = (event) => {
      const msg = event.data && event.data.pluginMessage;
      if (msg && msg.type === 'settings') {
        setting('base_url').value = msg.baseUrl || DEFAULTS.baseUrl;
        setting('api_key').value = msg.apiKey || '';
      }
    };

    document.getElementById('saveSettings').onclick = () => {
      window.parent.postMessage({ pluginMessage: {
        type: 'set-settings',
        baseUrl: setting('base_url').value,
        apiKey: setting('api_key').value,
      } }, '*');
    };
    document.getElementById('loadSettings').onclick = () => {
      window.parent.postMessage({ pluginMessage: { type: 'get-settings' } }, '*');
    };

    function collectValues() {
      const values = {};
      fieldsBox.querySelectorAll('[data-name]').forEach((input) => {
        values[input.dataset.name] = input.type === 'checkbox' ? input.checked : input.value;
      });
      return values;
    }

    function buildUrl(base, endpoint, values) {
      const path = endpoint.path.replace(/\{([^}]+)\}/g, (_, k) => encodeURIComponent(values[k] || ''));
      const url = new URL(base.replace(/\/$/, '') + path);
      endpoint.queryParams.forEach((k) => {
        if (values[k] !== undefined && values[k] !== '') url.searchParams.append(k, String(values[k]));
      });
      if (DEFAULTS.auth.location === 'query' && setting('api_key').value) {
        url.searchParams.append(DEFAULTS.auth.header, setting('api_key').value);
      }
      return url.toString();
    }

    document.getElementById('run').onclick = async () => {
      resultPre.textContent = 'Running...';
      try {
        const e = ENDPOINTS[Number(endpointSelect.value)];
        const values = collectValues();
        const apiKey = setting('api_key').value || '';
        const headers = { 'Content-Type': 'application/json' };
        if (apiKey && DEFAULTS.auth.location === 'header') {
          headers[DEFAULTS.auth.header] = DEFAULTS.auth.prefix + apiKey;
        }
        const body = values.body ? JSON.stringify(JSON.parse(values.body)) : undefined;
        const res = await fetch(buildUrl(setting('base_url').value || DEFAULTS.baseUrl, e, values), {
          method: e.method,
          headers,
          body,
        });
        const txt = await res.text();
        let json;
        try { json = JSON.parse(txt); } catch (err) { json = { raw: txt }; }
        resultPre.textContent = JSON.stringify(json, null, 2);
        window.__lastResult = json;
      } catch (err) {
        resultPre.textContent = 'Error: ' + err.message;
      }
    };
@@apply_script
  </script>
</body>
</html>
""",
    [
        "api_name",
        "description",
        "settings_fields",
        "apply_button",
        "endpoints_json",
        "defaults_json",
        "apply_script",
    ],
)

APPLY_SCRIPT: NamedTemplate = NamedTemplate(
    "figma.apply_script",
    r"""
    document.getElementById('apply').onclick = () => {
      const res = window.__lastResult;
      if (!res) {
        resultPre.textContent = 'Run an endpoint first to get a result';
        return;
      }
      let text = '';
      if (res.text) text = Array.isArray(res.text) ? res.text.join('\n') : String(res.text);
      else if (res.translations && res.translations[0]) text = res.translations[0].text;
      else text = JSON.stringify(res);
      window.parent.postMessage({ pluginMessage: { type: 'apply-to-selection', text } }, '*');
    };""",
    [],
)

SETTINGS_FIELD: NamedTemplate = NamedTemplate(
    "figma.settings_field",
    """      <label>
        <span>@@label</span>
        <input id="setting_@@{field_name}" type="@@input_type" />
      </label>""",
    ["label", "field_name", "input_type"],
)

STYLES_CSS: NamedTemplate = NamedTemplate(
    "figma.styles_css",
    """:root { --bg: #ffffff; --muted: #6b7280; --border: #e5e7eb; --primary: #111827; }
* { box-sizing: border-box; }
body { font: 13px Inter, system-ui, Arial, sans-serif; margin: 0; background: var(--bg); color: var(--primary); }
header { padding: 12px 16px; border-bottom: 1px solid var(--border); }
h1 { font-size: 14px; margin: 0; }
main { padding: 12px; display: grid; gap: 12px; }
.card { border: 1px solid var(--border); border-radius: 8px; padding: 12px; }
.muted { color: var(--muted); }
label { display: grid; gap: 6px; margin: 8px 0; }
input, textarea, select { width: 100%; padding: 8px; border: 1px solid var(--border); border-radius: 6px; }
button { padding: 8px 10px; border: 1px solid var(--border); background: #f9fafb; border-radius: 6px; cursor: pointer; }
button.secondary { background: #fff; }
button:hover { background: #f3f4f6; }
.row { display: flex; gap: 8px; }
.result { max-height: 220px; overflow: auto; background: #0b1022; color: #e1e7ff; padding: 10px; border-radius: 6px; }
""",
    [],
)

README_MD: NamedTemplate = NamedTemplate(
    "figma.readme_md",
    """# @@api_name Figma Plugin

This plugin lets you call @@api_name endpoints from inside Figma.

## Install
1. Extract the bundle.
2. Open the Figma desktop app.
3. Plugins → Development → Import plugin from manifest…
4. Select `figma-plugin/manifest.json`.

## Use
1. Open the plugin from Plugins → Development.
2. In Settings, set the Base URL (default: @@base_url) and your API key.
3. Pick an endpoint, fill in its fields, then Run.
@@apply_step
## Notes
- Network requests run in the UI context.
- The API key is stored via `figma.clientStorage` on the main thread.
- Auth: `@@auth_header` (@@auth_location, prefix: "@@auth_prefix").
""",
    ["api_name", "base_url", "apply_step", "auth_header", "auth_location", "auth_prefix"],
)

DOCUMENTATION: NamedTemplate = NamedTemplate(
    "figma.documentation",
    """# @@api_name Figma Plugin

Generated from your OpenAPI specification.

## Features
@@feature_list

@@feature_sections
## Installation
1. Extract the bundle.
2. Open the Figma desktop app.
3. Go to Plugins → Development → Import plugin from manifest…
4. Select `figma-plugin/manifest.json`.

## Configuration
Open the plugin → Settings and set the Base URL and API key.
@@placeholder_note
## Docs
Figma Plugin Docs: https://www.figma.com/plugin-docs/intro/
""",
    ["api_name", "feature_list", "feature_sections", "placeholder_note"],
)

REGISTRY: TemplateRegistry = TemplateRegistry(
    [CODE_JS, UI_HTML, APPLY_SCRIPT, SETTINGS_FIELD, STYLES_CSS, README_MD, DOCUMENTATION]
)

__all__: List[str] = ["REGISTRY"]
