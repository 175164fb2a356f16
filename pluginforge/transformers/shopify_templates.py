# File: pluginforge/transformers/shopify_templates.py
"""Named templates for the Shopify (Remix + Polaris) app bundle."""

from __future__ import annotations

from typing import List

from pluginforge.templates import NamedTemplate, TemplateRegistry

APP_TOML: NamedTemplate = NamedTemplate(
    "shopify.app_toml",
    """# Shopify App Configuration for @@api_name
name = @@app_name
client_id = "your-client-id"
application_url = "https://your-app-url.com"
embedded = true

[access_scopes]
scopes = @@scopes

[auth]
redirect_urls = [
  "https://your-app-url.com/auth/callback"
]

[webhooks]
api_version = @@api_version

[[webhooks.subscriptions]]
topics = [ "app/uninstalled" ]
uri = "/webhooks"

[pos]
embedded = false

[build]
automatically_update_urls_on_dev = true
dev_store_url = "your-dev-store.myshopify.com"
""",
    ["api_name", "app_name", "scopes", "api_version"],
)

SHOPIFY_SERVER_JS: NamedTemplate = NamedTemplate(
    "shopify.server_js",
    """import "@shopify/shopify-app-remix/adapters/node";
import {
  ApiVersion,
  AppDistribution,
  DeliveryMethod,
  shopifyApp,
} from "@shopify/shopify-app-remix/server";
import { PrismaSessionStorage } from "@shopify/shopify-app-session-storage-prisma";
import { restResources } from "@shopify/shopify-api/rest/admin/@@api_version";
import prisma from "./db.server";

const shopify = shopifyApp({
  apiKey: process.env.SHOPIFY_API_KEY,
  apiSecretKey: process.env.SHOPIFY_API_SECRET || "",
  apiVersion: ApiVersion.@@api_version_const,
  scopes: @@scopes_json,
  appUrl: process.env.SHOPIFY_APP_URL || "",
  authPathPrefix: "/auth",
  sessionStorage: new PrismaSessionStorage(prisma),
  distribution: AppDistribution.AppStore,
  restResources,
  webhooks: {
    APP_UNINSTALLED: {
      deliveryMethod: DeliveryMethod.Http,
      callbackUrl: "/webhooks",
    },
  },
  hooks: {
    afterAuth: async ({ session }) => {
      shopify.registerWebhooks({ session });
    },
  },
  future: {
    unstable_newEmbeddedAuthStrategy: true,
  },
  ...(process.env.SHOP_CUSTOM_DOMAIN
    ? { customShopDomains: [process.env.SHOP_CUSTOM_DOMAIN] }
    : {}),
});

export default shopify;
export const apiVersion = ApiVersion.@@api_version_const;
export const addDocumentResponseHeaders = shopify.addDocumentResponseHeaders;
export const authenticate = shopify.authenticate;
export const unauthenticated = shopify.unauthenticated;
export const login = shopify.login;
export const registerWebhooks = shopify.registerWebhooks;
export const sessionStorage = shopify.sessionStorage;
""",
    ["api_version", "api_version_const", "scopes_json"],
)

DB_SERVER_JS: NamedTemplate = NamedTemplate(
    "shopify.db_server_js",
    """import { PrismaClient } from "@prisma/client";

const prisma = global.prisma || new PrismaClient();

if (process.env.NODE_ENV !== "production") {
  global.prisma = prisma;
}

export default prisma;
""",
    [],
)

API_SERVICE_JS: NamedTemplate = NamedTemplate(
    "shopify.api_service_js",
    """// @@api_name client used by the app routes.
// Auth: @@auth_summary

const AUTH = @@auth_json;
const DEFAULT_BASE_URL = @@base_url;

class @@{class_name}Service {
  constructor(apiKey = process.env.@@env_var, baseUrl = DEFAULT_BASE_URL) {
    this.apiKey = apiKey;
    this.baseUrl = baseUrl.replace(/\\/$/, "");
  }

  async makeRequest(endpoint, options = {}) {
    const url = new URL(this.baseUrl + endpoint);
    const headers = { "Content-Type": "application/json", ...(options.headers || {}) };
    if (this.apiKey) {
      if (AUTH.location === "query") {
        url.searchParams.append(AUTH.header, this.apiKey);
      } else if (AUTH.location === "cookie") {
        headers["Cookie"] = `${AUTH.header}=${this.apiKey}`;
      } else {
        headers[AUTH.header] = AUTH.prefix + this.apiKey;
      }
    }
    const body =
      options.body !== undefined && typeof options.body !== "string"
        ? JSON.stringify(options.body)
        : options.body;

    const response = await fetch(url.toString(), { ...options, headers, body });
    if (!response.ok) {
      throw new Error(`API request failed: ${response.status} ${response.statusText}`);
    }
    const text = await response.text();
    try {
      return JSON.parse(text);
    } catch (error) {
      return { raw: text };
    }
  }

@@methods
}

export const METHODS = @@methods_json;

export default @@{class_name}Service;
""",
    [
        "api_name",
        "auth_summary",
        "auth_json",
        "base_url",
        "class_name",
        "env_var",
        "methods",
        "methods_json",
    ],
)

ENDPOINT_METHOD: NamedTemplate = NamedTemplate(
    "shopify.endpoint_method",
    """  /**
   * @@summary
   * @@http_method @@path
   */
  async @@method_name(params = {}, options = {}) {
    const endpoint = @@path_expr;
@@query_block
    return this.makeRequest(finalEndpoint, { method: "@@http_method", ...options });
  }""",
    ["summary", "http_method", "path", "method_name", "path_expr", "query_block"],
)

QUERY_BLOCK: NamedTemplate = NamedTemplate(
    "shopify.query_block",
    """    const query = new URLSearchParams();
    for (const key of @@names_json) {
      if (params[key] !== undefined && params[key] !== null && params[key] !== "") {
        query.append(key, String(params[key]));
      }
    }
    const queryString = query.toString();
    const finalEndpoint = queryString ? `${endpoint}?${queryString}` : endpoint;""",
    ["names_json"],
)

FEATURE_ROUTE_JSX: NamedTemplate = NamedTemplate(
    "shopify.feature_route_jsx",
    """import { json } from "@remix-run/node";
import { Form, useActionData, useLoaderData, useNavigation } from "@remix-run/react";
import {
  Banner,
  BlockStack,
  Button,
  Card,
  Checkbox,
  Layout,
  Page,
  Select,
  Text,
  TextField,
} from "@shopify/polaris";
import { authenticate } from "../shopify.server";
import prisma from "../db.server";
import @@{class_name}Service, { METHODS } from "../services/api-service";

const FEATURE = @@feature_json;

export async function loader({ request }) {
  const { session } = await authenticate.admin(request);
  return json({ shop: session.shop, feature: FEATURE });
}

export async function action({ request }) {
  const { session } = await authenticate.admin(request);
  const formData = await request.formData();
  const endpointId = String(formData.get("_endpoint") || "");
  const methodName = METHODS[endpointId];
  if (!methodName) {
    return json({ error: `Unknown endpoint: ${endpointId}` }, { status: 400 });
  }

  const settings = await prisma.@@settings_client.findUnique({ where: { shop: session.shop } });
  const params = {};
  let body;
  for (const [key, value] of formData.entries()) {
    if (key === "_endpoint") continue;
    if (key === "body") {
      body = value ? JSON.parse(String(value)) : undefined;
    } else {
      params[key] = value;
    }
  }

  try {
    const service = new @@{class_name}Service(settings?.apiKey || undefined, settings?.baseUrl || undefined);
    const result = await service[methodName](params, body === undefined ? {} : { body });
    return json({ success: true, result });
  } catch (error) {
    return json({ error: error.message }, { status: 400 });
  }
}

export default function @@{component_name}() {
  const { feature } = useLoaderData();
  const actionData = useActionData();
  const navigation = useNavigation();
  const isLoading = navigation.state === "submitting";

  return (
    <Page title={feature.name}>
      <Layout>
        <Layout.Section>
          <BlockStack gap="400">
            {actionData?.error && (
              <Banner tone="critical" title="Error">
                {actionData.error}
              </Banner>
            )}
            {actionData?.success && (
              <Banner tone="success" title="Success">
                <pre>{JSON.stringify(actionData.result, null, 2)}</pre>
              </Banner>
            )}
            <Text as="p">{feature.description}</Text>
@@forms
          </BlockStack>
        </Layout.Section>
      </Layout>
    </Page>
  );
}
""",
    ["class_name", "feature_json", "settings_client", "component_name", "forms"],
)

FEATURE_FORM_JSX: NamedTemplate = NamedTemplate(
    "shopify.feature_form_jsx",
    """            <Card>
              <Form method="post">
                <BlockStack gap="200">
                  <Text as="h2" variant="headingMd">{@@title_json}</Text>
                  <input type="hidden" name="_endpoint" value={@@endpoint_json} />
@@fields
                  <Button submit loading={isLoading}>{@@action_json}</Button>
                </BlockStack>
              </Form>
            </Card>""",
    ["title_json", "endpoint_json", "fields", "action_json"],
)

SETTINGS_ROUTE_JSX: NamedTemplate = NamedTemplate(
    "shopify.settings_route_jsx",
    """import { json } from "@remix-run/node";
import { Form, useActionData, useLoaderData, useNavigation } from "@remix-run/react";
import { Banner, BlockStack, Button, Card, Checkbox, Layout, Page, TextField } from "@shopify/polaris";
import { useState } from "react";
import { authenticate } from "../shopify.server";
import prisma from "../db.server";

export async function loader({ request }) {
  const { session } = await authenticate.admin(request);
  const settings = await prisma.@@settings_client.findUnique({ where: { shop: session.shop } });
  return json({
    baseUrl: settings?.baseUrl || @@base_url,
    hasKey: Boolean(settings?.apiKey),
    enabled: settings?.enabled ?? false,
  });
}

export async function action({ request }) {
  const { session } = await authenticate.admin(request);
  const formData = await request.formData();
  const data = {
    baseUrl: String(formData.get("base_url") || ""),
    enabled: formData.get("enabled") === "on",
  };
  const apiKey = String(formData.get("api_key") || "");
  if (apiKey) data.apiKey = apiKey;

  await prisma.@@settings_client.upsert({
    where: { shop: session.shop },
    update: data,
    create: { shop: session.shop, ...data },
  });
  return json({ success: true });
}

export default function ApiSettingsPage() {
  const settings = useLoaderData();
  const actionData = useActionData();
  const navigation = useNavigation();
  const [baseUrl, setBaseUrl] = useState(settings.baseUrl);
  const [apiKey, setApiKey] = useState("");
  const [enabled, setEnabled] = useState(settings.enabled);

  return (
    <Page title="@@api_name API Settings">
      <Layout>
        <Layout.Section>
          {actionData?.success && <Banner tone="success" title="Settings saved" />}
          <Card>
            <Form method="post">
              <BlockStack gap="300">
                <TextField
                  label="API Base URL"
                  name="base_url"
                  value={baseUrl}
                  onChange={setBaseUrl}
                  autoComplete="off"
                />
                <TextField
                  label={@@key_label_json}
                  name="api_key"
                  type="password"
                  value={apiKey}
                  onChange={setApiKey}
                  helpText={settings.hasKey ? "A key is stored; leave blank to keep it." : "Sent as @@auth_summary"}
                  autoComplete="off"
                />
                <Checkbox label="Enable API Integration" name="enabled" checked={enabled} onChange={setEnabled} />
                <Button submit loading={navigation.state === "submitting"}>Save</Button>
              </BlockStack>
            </Form>
          </Card>
        </Layout.Section>
      </Layout>
    </Page>
  );
}
""",
    ["settings_client", "base_url", "api_name", "key_label_json", "auth_summary"],
)

PRISMA_SCHEMA: NamedTemplate = NamedTemplate(
    "shopify.prisma_schema",
    """generator client {
  provider = "prisma-client-js"
}

datasource db {
  provider = "sqlite"
  url      = "file:dev.db"
}

model Session {
  id            String    @id
  shop          String
  state         String
  isOnline      Boolean   @default(false)
  scope         String?
  expires       DateTime?
  accessToken   String
  userId        BigInt?
  firstName     String?
  lastName      String?
  email         String?
  accountOwner  Boolean   @default(false)
  locale        String?
  collaborator  Boolean?  @default(false)
  emailVerified Boolean?  @default(false)
}

model @@{model_name} {
  id        Int      @id @default(autoincrement())
  shop      String   @unique
  apiKey    String?
  baseUrl   String?
  enabled   Boolean  @default(false)
  createdAt DateTime @default(now())
  updatedAt DateTime @updatedAt
}
@@extra_models""",
    ["model_name", "extra_models"],
)

TRANSLATION_JOB_MODEL: NamedTemplate = NamedTemplate(
    "shopify.translation_job_model",
    """
model TranslationJob {
  id              Int      @id @default(autoincrement())
  shop            String
  productId       String?
  status          String   @default("pending")
  sourceLanguage  String
  targetLanguages String
  results         String?
  createdAt       DateTime @default(now())
  updatedAt       DateTime @updatedAt
}
""",
    [],
)

DOCUMENTATION: NamedTemplate = NamedTemplate(
    "shopify.documentation",
    """# @@api_name Shopify App

@@description

## Features

@@feature_sections
## Installation

1. Install dependencies: `npm install`
2. Set up environment variables in `.env`:
   - `SHOPIFY_API_KEY`
   - `SHOPIFY_API_SECRET`
   - `@@env_var`
3. Run database migrations: `npx prisma db push`
4. Start the development server: `npm run dev`

## Configuration

Configure your @@api_name API credentials on the API Settings page.
Requests go to `@@base_url` with the credential sent as @@auth_summary.
@@placeholder_note
## API Service Methods

@@method_list

## Usage

@@usage_sections""",
    [
        "api_name",
        "description",
        "feature_sections",
        "env_var",
        "base_url",
        "auth_summary",
        "placeholder_note",
        "method_list",
        "usage_sections",
    ],
)

REGISTRY: TemplateRegistry = TemplateRegistry(
    [
        APP_TOML,
        SHOPIFY_SERVER_JS,
        DB_SERVER_JS,
        API_SERVICE_JS,
        ENDPOINT_METHOD,
        QUERY_BLOCK,
        FEATURE_ROUTE_JSX,
        FEATURE_FORM_JSX,
        SETTINGS_ROUTE_JSX,
        PRISMA_SCHEMA,
        TRANSLATION_JOB_MODEL,
        DOCUMENTATION,
    ]
)

__all__: List[str] = ["REGISTRY"]
