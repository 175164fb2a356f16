# File: pluginforge/transformers/wordpress_templates.py
"""Named templates for the WordPress plugin bundle."""

from __future__ import annotations

from typing import List

from pluginforge.templates import NamedTemplate, TemplateRegistry

MAIN_PHP: NamedTemplate = NamedTemplate(
    "wordpress.main_php",
    """<?php
/**
 * Plugin Name: @@plugin_name
 * Description: @@description
 * Version: @@version
 * Requires at least: 5.0
 * Requires PHP: 7.4
 * Text Domain: @@slug
 *
 * @package @@{prefix}_Integration
 */

// Prevent direct access
if (!defined('ABSPATH')) {
    exit;
}

define('@@{const}_PLUGIN_URL', plugin_dir_url(__FILE__));
define('@@{const}_PLUGIN_PATH', plugin_dir_path(__FILE__));
define('@@{const}_VERSION', @@version_literal);

require_once @@{const}_PLUGIN_PATH . 'includes/class-api-service.php';
require_once @@{const}_PLUGIN_PATH . 'includes/class-admin.php';
require_once @@{const}_PLUGIN_PATH . 'includes/class-shortcodes.php';
require_once @@{const}_PLUGIN_PATH . 'includes/class-widget.php';
require_once @@{const}_PLUGIN_PATH . 'includes/class-activator.php';

/**
 * Main plugin class
 */
class @@{prefix}_Integration {

    /**
     * Single instance
     */
    private static $instance = null;

    private $api_service;
    private $admin;
    private $shortcodes;

    public static function get_instance() {
        if (null === self::$instance) {
            self::$instance = new self();
        }
        return self::$instance;
    }

    private function __construct() {
        $this->api_service = new @@{prefix}_API_Service();
        $this->admin = new @@{prefix}_Admin($this->api_service);
        $this->shortcodes = new @@{prefix}_Shortcodes($this->api_service);

        add_action('widgets_init', array($this, 'register_widgets'));
        add_action('admin_enqueue_scripts', array($this, 'enqueue_admin_assets'));
    }

    public function register_widgets() {
        register_widget('@@{prefix}_Widget');
    }

    public function enqueue_admin_assets($hook) {
        if (strpos($hook, '@@slug') === false) {
            return;
        }

        wp_enqueue_style('@@{slug}-admin', @@{const}_PLUGIN_URL . 'assets/admin.css', array(), @@{const}_VERSION);
        wp_enqueue_script('@@{slug}-admin', @@{const}_PLUGIN_URL . 'assets/admin.js', array('jquery'), @@{const}_VERSION, true);

        wp_localize_script('@@{slug}-admin', '@@{option}_ajax', array(
            'ajax_url' => admin_url('admin-ajax.php'),
            'nonce' => wp_create_nonce('@@{option}_nonce'),
            'endpoints' => @@{prefix}_API_Service::ENDPOINTS,
        ));
    }

    public function get_api_service() {
        return $this->api_service;
    }
}

register_activation_hook(__FILE__, array('@@{prefix}_Activator', 'activate'));
register_deactivation_hook(__FILE__, array('@@{prefix}_Activator', 'deactivate'));

add_action('plugins_loaded', array('@@{prefix}_Integration', 'get_instance'));
""",
    [
        "plugin_name",
        "description",
        "version",
        "version_literal",
        "slug",
        "prefix",
        "const",
        "option",
    ],
)

API_SERVICE_PHP: NamedTemplate = NamedTemplate(
    "wordpress.api_service_php",
    """<?php
/**
 * @@api_name API Service
 *
 * Auth: @@auth_summary
 *
 * @package @@{prefix}_Integration
 */

// Prevent direct access
if (!defined('ABSPATH')) {
    exit;
}

class @@{prefix}_API_Service {

    const BASE_URL = @@base_url;
    const AUTH_HEADER = @@auth_header;
    const AUTH_LOCATION = @@auth_location;
    const AUTH_PREFIX = @@auth_prefix;

    /**
     * Endpoint id => method, AJAX action and HTTP verb
     */
    const ENDPOINTS = array(
@@endpoint_map
    );

    private $api_key;
    private $base_url;

    public function __construct() {
        $this->api_key = get_option('@@{option}_api_key', '');
        $this->base_url = untrailingslashit(get_option('@@{option}_base_url', self::BASE_URL));
    }

    /**
     * Send a request and decode the JSON response
     */
    public function make_request($endpoint, $method = 'GET', $data = null, $query = array()) {
        if (empty($this->api_key)) {
            return new WP_Error('no_api_key', 'API key not configured');
        }

        $headers = array('Content-Type' => 'application/json');
        if (self::AUTH_LOCATION === 'query') {
            $query[self::AUTH_HEADER] = $this->api_key;
        } elseif (self::AUTH_LOCATION === 'cookie') {
            $headers['Cookie'] = self::AUTH_HEADER . '=' . rawurlencode($this->api_key);
        } else {
            $headers[self::AUTH_HEADER] = self::AUTH_PREFIX . $this->api_key;
        }

        $url = $this->base_url . $endpoint;
        if (!empty($query)) {
            $url .= '?' . http_build_query($query);
        }

        $args = array(
            'method' => $method,
            'headers' => $headers,
            'timeout' => 30,
        );
        if ($data !== null) {
            $args['body'] = wp_json_encode($data);
        }

        do_action('@@{option}_before_request', $endpoint, $method);

        $response = wp_remote_request($url, $args);
        if (is_wp_error($response)) {
            do_action('@@{option}_request_failed', $endpoint, $response);
            return $response;
        }

        $code = wp_remote_retrieve_response_code($response);
        $body = json_decode(wp_remote_retrieve_body($response), true);

        if ($code >= 400) {
            $error = new WP_Error('api_error', 'API request failed', array('status' => $code, 'body' => $body));
            do_action('@@{option}_request_failed', $endpoint, $error);
            return $error;
        }

        return apply_filters('@@{option}_response', $body, $endpoint);
    }

    /**
     * Dispatch by endpoint id
     */
    public function call($endpoint_id, $params = array(), $data = null) {
        if (!isset(self::ENDPOINTS[$endpoint_id])) {
            return new WP_Error('unknown_endpoint', 'Unknown endpoint: ' . $endpoint_id);
        }
        $method = self::ENDPOINTS[$endpoint_id]['method'];
        return $this->$method($params, $data);
    }

    public function test_connection() {
        $result = $this->make_request(@@probe_path);
        return !is_wp_error($result);
    }

    private function path_param($params, $name) {
        return isset($params[$name]) ? rawurlencode((string) $params[$name]) : '';
    }

@@methods
@@translation_helpers
}
""",
    [
        "api_name",
        "auth_summary",
        "prefix",
        "option",
        "base_url",
        "auth_header",
        "auth_location",
        "auth_prefix",
        "endpoint_map",
        "probe_path",
        "methods",
        "translation_helpers",
    ],
)

ENDPOINT_METHOD: NamedTemplate = NamedTemplate(
    "wordpress.endpoint_method",
    """    /**
     * @@summary
     * @@http_method @@path
     */
    public function @@method_name($params = array(), $data = null) {
        $endpoint = @@path_expr;
        $query = @@query_expr;
        return $this->make_request($endpoint, '@@http_method', $data, $query);
    }
""",
    ["summary", "http_method", "path", "method_name", "path_expr", "query_expr"],
)

TRANSLATION_HELPERS: NamedTemplate = NamedTemplate(
    "wordpress.translation_helpers",
    """    /**
     * Translate a piece of text
     */
    public function translate_text($text, $source_lang = 'en', $target_lang = 'es') {
        $text = apply_filters('@@{option}_translation_text', $text);
        do_action('@@{option}_before_translation', $text, $source_lang, $target_lang);

        $result = $this->call(@@endpoint_id, array(), array(
            'text' => array($text),
            'source_lang' => strtoupper($source_lang),
            'target_lang' => strtoupper($target_lang),
        ));

        if (is_wp_error($result)) {
            do_action('@@{option}_translation_failed', $text, $result);
            return $result;
        }

        $translated = $text;
        if (isset($result['translations'][0]['text'])) {
            $translated = $result['translations'][0]['text'];
        } elseif (isset($result['text'])) {
            $translated = is_array($result['text']) ? implode("\\n", $result['text']) : $result['text'];
        }

        $translated = apply_filters('@@{option}_translated_result', $translated, $text);
        do_action('@@{option}_after_translation', $text, $translated);
        return $translated;
    }

    /**
     * Translate a post's title and content into a new draft
     */
    public function translate_post($post_id, $target_lang) {
        $post = get_post($post_id);
        if (!$post) {
            return new WP_Error('invalid_post', 'Post not found');
        }

        $title = $this->translate_text($post->post_title, 'en', $target_lang);
        if (is_wp_error($title)) {
            return $title;
        }
        $content = $this->translate_text($post->post_content, 'en', $target_lang);
        if (is_wp_error($content)) {
            return $content;
        }

        return wp_insert_post(array(
            'post_title' => $title,
            'post_content' => $content,
            'post_status' => 'draft',
            'post_type' => $post->post_type,
            'meta_input' => array(
                '_@@{option}_original_post' => $post_id,
                '_@@{option}_target_lang' => $target_lang,
            ),
        ));
    }
""",
    ["option", "endpoint_id"],
)

ADMIN_PHP: NamedTemplate = NamedTemplate(
    "wordpress.admin_php",
    """<?php
/**
 * Admin Class
 *
 * @package @@{prefix}_Integration
 */

// Prevent direct access
if (!defined('ABSPATH')) {
    exit;
}

class @@{prefix}_Admin {

    private $api_service;

    /**
     * Menu slug => page title and template file
     */
    private $pages = array(
@@pages
    );

    public function __construct($api_service) {
        $this->api_service = $api_service;

        add_action('admin_menu', array($this, 'add_admin_menu'));
        add_action('admin_init', array($this, 'register_settings'));
        add_action('wp_ajax_@@{option}_test_connection', array($this, 'ajax_test_connection'));
@@translate_action
        foreach (@@{prefix}_API_Service::ENDPOINTS as $endpoint_id => $endpoint) {
            add_action('wp_ajax_' . $endpoint['action'], function () use ($endpoint_id) {
                $this->ajax_call_endpoint($endpoint_id);
            });
        }
    }

    public function add_admin_menu() {
        add_menu_page(
            @@menu_title,
            @@menu_title,
            'manage_options',
            '@@slug',
            array($this, 'render_page'),
            'dashicons-admin-plugins',
            30
        );

        foreach ($this->pages as $menu_slug => $page) {
            add_submenu_page(
                '@@slug',
                $page['title'],
                $page['title'],
                'manage_options',
                $menu_slug,
                array($this, 'render_page')
            );
        }
    }

    public function register_settings() {
        register_setting('@@{option}_settings', '@@{option}_api_key', array('sanitize_callback' => 'sanitize_text_field'));
        register_setting('@@{option}_settings', '@@{option}_base_url', array('sanitize_callback' => 'esc_url_raw'));
        register_setting('@@{option}_settings', '@@{option}_enabled', array('sanitize_callback' => 'rest_sanitize_boolean'));
    }

    public function render_page() {
        $menu_slug = isset($_GET['page']) ? sanitize_key(wp_unslash($_GET['page'])) : '@@slug';
        if (!isset($this->pages[$menu_slug])) {
            $menu_slug = key($this->pages);
        }
        $api_service = $this->api_service;
        include @@{const}_PLUGIN_PATH . 'admin/pages/' . $this->pages[$menu_slug]['file'];
    }

    public function ajax_test_connection() {
        check_ajax_referer('@@{option}_nonce', 'nonce');

        if (!current_user_can('manage_options')) {
            wp_send_json_error('Unauthorized');
        }

        wp_send_json_success(array('connected' => $this->api_service->test_connection()));
    }

    private function ajax_call_endpoint($endpoint_id) {
        check_ajax_referer('@@{option}_nonce', 'nonce');

        if (!current_user_can('edit_posts')) {
            wp_send_json_error('Unauthorized');
        }

        $params = isset($_POST['params']) ? array_map('sanitize_text_field', (array) wp_unslash($_POST['params'])) : array();
        $data = isset($_POST['body']) && $_POST['body'] !== '' ? json_decode(wp_unslash($_POST['body']), true) : null;

        $result = $this->api_service->call($endpoint_id, $params, $data);
        if (is_wp_error($result)) {
            wp_send_json_error($result->get_error_message());
        }
        wp_send_json_success($result);
    }
@@translate_handler
}
""",
    [
        "prefix",
        "option",
        "slug",
        "const",
        "menu_title",
        "pages",
        "translate_action",
        "translate_handler",
    ],
)

TRANSLATE_HANDLER: NamedTemplate = NamedTemplate(
    "wordpress.translate_handler",
    """
    public function ajax_translate_content() {
        check_ajax_referer('@@{option}_nonce', 'nonce');

        if (!current_user_can('edit_posts')) {
            wp_send_json_error('Unauthorized');
        }

        $post_id = isset($_POST['post_id']) ? intval($_POST['post_id']) : 0;
        $target_lang = isset($_POST['target_lang']) ? sanitize_text_field(wp_unslash($_POST['target_lang'])) : 'es';

        $result = $this->api_service->translate_post($post_id, $target_lang);
        if (is_wp_error($result)) {
            wp_send_json_error($result->get_error_message());
        }
        wp_send_json_success(array('translated_post_id' => $result));
    }""",
    ["option"],
)

SHORTCODES_PHP: NamedTemplate = NamedTemplate(
    "wordpress.shortcodes_php",
    """<?php
/**
 * Shortcodes Class
 *
 * @package @@{prefix}_Integration
 */

// Prevent direct access
if (!defined('ABSPATH')) {
    exit;
}

class @@{prefix}_Shortcodes {

    private $api_service;

    public function __construct($api_service) {
        $this->api_service = $api_service;

        add_shortcode('@@{option}_data', array($this, 'data_shortcode'));
@@translation_registrations
    }

    /**
     * Render the JSON result of a GET endpoint
     * [@@{option}_data endpoint="listItems"]
     */
    public function data_shortcode($atts) {
        $atts = shortcode_atts(array(
            'endpoint' => '',
            'cache' => 'true',
        ), $atts);

        $endpoints = @@{prefix}_API_Service::ENDPOINTS;
        if (!isset($endpoints[$atts['endpoint']]) || $endpoints[$atts['endpoint']]['http'] !== 'GET') {
            return '';
        }

        $cache_key = '@@{option}_' . md5($atts['endpoint']);
        if ($atts['cache'] === 'true') {
            $cached = get_transient($cache_key);
            if ($cached !== false) {
                return $cached;
            }
        }

        $result = $this->api_service->call($atts['endpoint']);
        if (is_wp_error($result)) {
            return '';
        }

        $output = '<pre class="@@{slug}-data">' . esc_html(wp_json_encode($result, JSON_PRETTY_PRINT)) . '</pre>';
        if ($atts['cache'] === 'true') {
            set_transient($cache_key, $output, HOUR_IN_SECONDS);
        }
        return $output;
    }
@@translation_shortcodes
}
""",
    ["prefix", "option", "slug", "translation_registrations", "translation_shortcodes"],
)

TRANSLATION_SHORTCODES: NamedTemplate = NamedTemplate(
    "wordpress.translation_shortcodes",
    """
    /**
     * Translation shortcode
     * [@@{option}_translate text="Hello World" source="en" target="es"]
     */
    public function translate_shortcode($atts) {
        $atts = shortcode_atts(array(
            'text' => '',
            'source' => 'en',
            'target' => 'es',
            'cache' => 'true',
        ), $atts);

        if (empty($atts['text'])) {
            return '';
        }

        $cache_key = '@@{option}_' . md5($atts['text'] . $atts['source'] . $atts['target']);
        if ($atts['cache'] === 'true') {
            $cached_translation = get_transient($cache_key);
            if ($cached_translation !== false) {
                return $cached_translation;
            }
        }

        $translation = $this->api_service->translate_text($atts['text'], $atts['source'], $atts['target']);
        if (is_wp_error($translation)) {
            return esc_html($atts['text']);
        }

        if ($atts['cache'] === 'true') {
            set_transient($cache_key, $translation, DAY_IN_SECONDS);
        }
        return esc_html($translation);
    }

    /**
     * Language switcher shortcode
     * [@@{option}_language_switcher style="dropdown"]
     */
    public function language_switcher_shortcode($atts) {
        $atts = shortcode_atts(array(
            'style' => 'dropdown',
            'show_flags' => 'false',
        ), $atts);

        $current_lang = get_locale();
        $languages = apply_filters('@@{option}_supported_languages', array(
@@languages
        ));

        $output = '<div class="@@{slug}-language-switcher">';
        if ($atts['style'] === 'dropdown') {
            $output .= '<select onchange="window.location.href=this.value">';
            foreach ($languages as $code => $name) {
                $selected = ($code === $current_lang) ? ' selected' : '';
                $url = esc_url(add_query_arg('lang', $code, get_permalink()));
                $output .= "<option value='{$url}'{$selected}>" . esc_html($name) . '</option>';
            }
            $output .= '</select>';
        } else {
            foreach ($languages as $code => $name) {
                $active = ($code === $current_lang) ? 'active' : '';
                $url = esc_url(add_query_arg('lang', $code, get_permalink()));
                $output .= "<a href='{$url}' class='lang-link {$active}'>" . esc_html($name) . '</a> ';
            }
        }
        $output .= '</div>';

        return $output;
    }""",
    ["option", "slug", "languages"],
)

WIDGET_PHP: NamedTemplate = NamedTemplate(
    "wordpress.widget_php",
    """<?php
/**
 * Widget Class
 *
 * @package @@{prefix}_Integration
 */

// Prevent direct access
if (!defined('ABSPATH')) {
    exit;
}

class @@{prefix}_Widget extends WP_Widget {

    /**
     * Widget type => label
     */
    private $widget_types = array(
@@widget_types
    );

    public function __construct() {
        parent::__construct(
            '@@{option}_widget',
            @@widget_title,
            array('description' => @@widget_description)
        );
    }

    public function widget($args, $instance) {
        echo $args['before_widget'];

        $title = !empty($instance['title']) ? $instance['title'] : @@widget_title;
        echo $args['before_title'] . apply_filters('widget_title', $title) . $args['after_title'];

        $widget_type = !empty($instance['widget_type']) ? $instance['widget_type'] : '@@default_type';
        $endpoint = !empty($instance['endpoint']) ? $instance['endpoint'] : '';

        switch ($widget_type) {
@@widget_cases
            default:
                echo do_shortcode('[@@{option}_data endpoint="' . esc_attr($endpoint) . '"]');
                break;
        }

        echo $args['after_widget'];
    }

    public function form($instance) {
        $title = !empty($instance['title']) ? $instance['title'] : @@widget_title;
        $widget_type = !empty($instance['widget_type']) ? $instance['widget_type'] : '@@default_type';
        $endpoint = !empty($instance['endpoint']) ? $instance['endpoint'] : '';
        ?>
        <p>
            <label for="<?php echo $this->get_field_id('title'); ?>">Title:</label>
            <input class="widefat" id="<?php echo $this->get_field_id('title'); ?>" name="<?php echo $this->get_field_name('title'); ?>" type="text" value="<?php echo esc_attr($title); ?>">
        </p>
        <p>
            <label for="<?php echo $this->get_field_id('widget_type'); ?>">Widget Type:</label>
            <select class="widefat" id="<?php echo $this->get_field_id('widget_type'); ?>" name="<?php echo $this->get_field_name('widget_type'); ?>">
                <?php foreach ($this->widget_types as $value => $label) : ?>
                    <option value="<?php echo esc_attr($value); ?>" <?php selected($widget_type, $value); ?>><?php echo esc_html($label); ?></option>
                <?php endforeach; ?>
            </select>
        </p>
        <p>
            <label for="<?php echo $this->get_field_id('endpoint'); ?>">Endpoint id:</label>
            <input class="widefat" id="<?php echo $this->get_field_id('endpoint'); ?>" name="<?php echo $this->get_field_name('endpoint'); ?>" type="text" value="<?php echo esc_attr($endpoint); ?>">
        </p>
        <?php
    }

    public function update($new_instance, $old_instance) {
        $instance = array();
        $instance['title'] = !empty($new_instance['title']) ? sanitize_text_field($new_instance['title']) : '';
        $instance['widget_type'] = !empty($new_instance['widget_type']) ? sanitize_key($new_instance['widget_type']) : '@@default_type';
        $instance['endpoint'] = !empty($new_instance['endpoint']) ? sanitize_text_field($new_instance['endpoint']) : '';
        return $instance;
    }
@@translate_form
}
""",
    [
        "prefix",
        "option",
        "widget_title",
        "widget_description",
        "widget_types",
        "default_type",
        "widget_cases",
        "translate_form",
    ],
)

WIDGET_TRANSLATION_CASES: NamedTemplate = NamedTemplate(
    "wordpress.widget_translation_cases",
    """            case 'language_switcher':
                echo do_shortcode('[@@{option}_language_switcher style="list"]');
                break;

            case 'translate_form':
                $this->render_translate_form();
                break;
""",
    ["option"],
)

WIDGET_TRANSLATE_FORM: NamedTemplate = NamedTemplate(
    "wordpress.widget_translate_form",
    """
    private function render_translate_form() {
        ?>
        <form class="@@{slug}-translate-form" method="post">
            <p>
                <label for="translate_text">Text to translate:</label>
                <textarea id="translate_text" name="translate_text" rows="3" cols="30"></textarea>
            </p>
            <p>
                <label for="source_lang">From:</label>
                <select id="source_lang" name="source_lang">
@@source_options
                </select>
            </p>
            <p>
                <label for="target_lang">To:</label>
                <select id="target_lang" name="target_lang">
@@target_options
                </select>
            </p>
            <p>
                <input type="submit" value="Translate" class="button">
            </p>
        </form>
        <div id="translation_result"></div>
        <?php
    }""",
    ["slug", "source_options", "target_options"],
)

SETTINGS_PAGE_PHP: NamedTemplate = NamedTemplate(
    "wordpress.settings_page_php",
    """<?php
/**
 * @@feature_name Admin Page
 *
 * @package @@{prefix}_Integration
 */

// Prevent direct access
if (!defined('ABSPATH')) {
    exit;
}

$message = '';

if (isset($_POST['@@{option}_nonce']) && wp_verify_nonce(sanitize_text_field(wp_unslash($_POST['@@{option}_nonce'])), '@@{option}_action')) {
    if (!current_user_can('manage_options')) {
        wp_die('Unauthorized');
    }

    update_option('@@{option}_api_key', sanitize_text_field(wp_unslash($_POST['api_key'] ?? '')));
    update_option('@@{option}_base_url', esc_url_raw(wp_unslash($_POST['base_url'] ?? '')));
    update_option('@@{option}_enabled', isset($_POST['enabled']));
    $message = 'Settings saved successfully!';
}

$current_api_key = get_option('@@{option}_api_key', '');
$current_base_url = get_option('@@{option}_base_url', @@{prefix}_API_Service::BASE_URL);
$enabled = get_option('@@{option}_enabled', false);
?>

<div class="wrap @@{slug}-admin">
    <h1><?php echo esc_html(@@feature_title); ?></h1>

    <?php if ($message) : ?>
        <div class="notice notice-success is-dismissible">
            <p><?php echo esc_html($message); ?></p>
        </div>
    <?php endif; ?>

    <div class="card">
        <h2><?php echo esc_html(@@feature_description); ?></h2>

        <form method="post" action="">
            <?php wp_nonce_field('@@{option}_action', '@@{option}_nonce'); ?>

            <table class="form-table">
                <tr>
                    <th scope="row"><label for="api_key">@@key_label</label></th>
                    <td><input type="password" id="api_key" name="api_key" value="<?php echo esc_attr($current_api_key); ?>" class="regular-text" required></td>
                </tr>
                <tr>
                    <th scope="row"><label for="base_url">API Base URL</label></th>
                    <td><input type="url" id="base_url" name="base_url" value="<?php echo esc_attr($current_base_url); ?>" class="regular-text"></td>
                </tr>
                <tr>
                    <th scope="row">Enable Integration</th>
                    <td>
                        <input type="checkbox" id="enabled" name="enabled" value="1" <?php checked($enabled, true); ?>>
                        <label for="enabled">Enable Integration</label>
                    </td>
                </tr>
            </table>

            <p class="description">Credential: @@auth_summary</p>

            <?php submit_button('Save Settings'); ?>
        </form>
    </div>

    <div class="card">
        <h3>API Status</h3>
        <p>
            <button type="button" class="button test-api-connection">Test API Connection</button>
            <span class="connection-status"></span>
        </p>
    </div>
</div>
""",
    [
        "feature_name",
        "feature_title",
        "feature_description",
        "prefix",
        "option",
        "slug",
        "key_label",
        "auth_summary",
    ],
)

FEATURE_PAGE_PHP: NamedTemplate = NamedTemplate(
    "wordpress.feature_page_php",
    """<?php
/**
 * @@feature_name Admin Page
 *
 * @package @@{prefix}_Integration
 */

// Prevent direct access
if (!defined('ABSPATH')) {
    exit;
}

$message = '';
$result = null;
$allowed_endpoints = array(@@allowed_endpoints);

if (isset($_POST['@@{option}_nonce']) && wp_verify_nonce(sanitize_text_field(wp_unslash($_POST['@@{option}_nonce'])), '@@{option}_action')) {
    if (!current_user_can('edit_posts')) {
        wp_die('Unauthorized');
    }

    $endpoint_id = sanitize_text_field(wp_unslash($_POST['endpoint'] ?? ''));
    if (in_array($endpoint_id, $allowed_endpoints, true)) {
        $params = isset($_POST['params']) ? array_map('sanitize_text_field', (array) wp_unslash($_POST['params'])) : array();
        $data = !empty($_POST['body']) ? json_decode(wp_unslash($_POST['body']), true) : null;
        $result = $api_service->call($endpoint_id, $params, $data);
        $message = is_wp_error($result) ? $result->get_error_message() : 'Request completed!';
    }
}
?>

<div class="wrap @@{slug}-admin">
    <h1><?php echo esc_html(@@feature_title); ?></h1>

    <?php if ($message) : ?>
        <div class="notice <?php echo is_wp_error($result) ? 'notice-error' : 'notice-success'; ?> is-dismissible">
            <p><?php echo esc_html($message); ?></p>
        </div>
    <?php endif; ?>

    <p class="description"><?php echo esc_html(@@feature_description); ?></p>

@@forms

    <?php if ($result !== null && !is_wp_error($result)) : ?>
        <div class="card">
            <h3>Result</h3>
            <pre class="@@{slug}-result"><?php echo esc_html(wp_json_encode($result, JSON_PRETTY_PRINT)); ?></pre>
        </div>
    <?php endif; ?>
</div>
""",
    [
        "feature_name",
        "feature_title",
        "feature_description",
        "prefix",
        "option",
        "slug",
        "allowed_endpoints",
        "forms",
    ],
)

FEATURE_FORM: NamedTemplate = NamedTemplate(
    "wordpress.feature_form",
    """    <div class="card">
        <h2><?php echo esc_html(@@title); ?></h2>
        <form method="post" action="">
            <?php wp_nonce_field('@@{option}_action', '@@{option}_nonce'); ?>
            <input type="hidden" name="endpoint" value="@@endpoint_id">
            <table class="form-table">
@@fields
            </table>
            <?php submit_button(@@button_label, @@button_class); ?>
        </form>
    </div>""",
    ["title", "option", "endpoint_id", "fields", "button_label", "button_class"],
)

ADMIN_CSS: NamedTemplate = NamedTemplate(
    "wordpress.admin_css",
    """/* Admin styles for @@api_name Integration */

.@@{slug}-admin .card {
    max-width: 880px;
    margin-top: 20px;
    padding: 16px 20px;
}

.@@{slug}-admin .form-table th {
    width: 220px;
}

.@@{slug}-admin textarea {
    width: 100%;
    min-height: 120px;
    font-family: monospace;
}

.@@{slug}-result {
    max-height: 360px;
    overflow: auto;
    background: #f6f7f7;
    border: 1px solid #dcdcde;
    padding: 12px;
}

.@@{slug}-status-indicator {
    display: inline-block;
    width: 10px;
    height: 10px;
    border-radius: 50%;
    margin-right: 6px;
}

.@@{slug}-status-connected {
    background: #00a32a;
}

.@@{slug}-status-disconnected {
    background: #d63638;
}

.setting-saved {
    border-color: #00a32a !important;
    box-shadow: 0 0 0 1px #00a32a;
}

@media screen and (max-width: 782px) {
    .@@{slug}-admin .form-table th {
        width: auto;
    }
}
""",
    ["api_name", "slug"],
)

ADMIN_JS: NamedTemplate = NamedTemplate(
    "wordpress.admin_js",
    r"""(function($) {
    'use strict';

    // Admin JavaScript for @@api_name Integration

    var settings = window.@@{option}_ajax || {};

    $(document).ready(function() {

        // Test API connection
        $('.test-api-connection').on('click', function(e) {
            e.preventDefault();

            var button = $(this);
            var originalText = button.text();
            var statusElement = button.siblings('.connection-status');

            button.prop('disabled', true).text('Testing...');
            statusElement.html('<span class="spinner is-active"></span>');

            $.ajax({
                url: settings.ajax_url,
                type: 'POST',
                data: {
                    action: '@@{option}_test_connection',
                    nonce: settings.nonce
                },
                success: function(response) {
                    if (response.success && response.data.connected) {
                        statusElement.html('<span class="@@{slug}-status-indicator @@{slug}-status-connected"></span>Connected');
                    } else {
                        statusElement.html('<span class="@@{slug}-status-indicator @@{slug}-status-disconnected"></span>Connection failed');
                    }
                },
                error: function() {
                    statusElement.html('<span class="@@{slug}-status-indicator @@{slug}-status-disconnected"></span>Error testing connection');
                },
                complete: function() {
                    button.prop('disabled', false).text(originalText);
                }
            });
        });

        // Run an endpoint over AJAX
        $('.@@{slug}-ajax-run').on('click', function(e) {
            e.preventDefault();

            var button = $(this);
            var form = button.closest('form');
            var endpointId = form.find('input[name="endpoint"]').val();
            var endpoint = (settings.endpoints || {})[endpointId];
            if (!endpoint) {
                showNotice('Unknown endpoint: ' + endpointId, 'error');
                return;
            }

            button.prop('disabled', true);
            $.ajax({
                url: settings.ajax_url,
                type: 'POST',
                data: form.serialize() + '&action=' + encodeURIComponent(endpoint.action) + '&nonce=' + settings.nonce,
                success: function(response) {
                    if (response.success) {
                        form.siblings('.@@{slug}-result').text(JSON.stringify(response.data, null, 2));
                        showNotice('Request completed!', 'success');
                    } else {
                        showNotice('Request failed: ' + response.data, 'error');
                    }
                },
                error: function() {
                    showNotice('Error during request', 'error');
                },
                complete: function() {
                    button.prop('disabled', false);
                }
            });
        });

        // Language switcher
        $('.language-switcher select').on('change', function() {
            window.location.href = updateUrlParameter(window.location.href, 'lang', $(this).val());
        });
    });

    function showNotice(message, type) {
        var notice = $('<div class="notice notice-' + type + ' is-dismissible"><p></p></div>');
        notice.find('p').text(message);
        $('.wrap h1').after(notice);

        setTimeout(function() {
            notice.fadeOut();
        }, 5000);
    }

    function updateUrlParameter(url, param, paramVal) {
        var parts = url.split('?');
        var kept = [];
        if (parts[1]) {
            parts[1].split('&').forEach(function(pair) {
                if (pair.split('=')[0] !== param) {
                    kept.push(pair);
                }
            });
        }
        kept.push(param + '=' + encodeURIComponent(paramVal));
        return parts[0] + '?' + kept.join('&');
    }

})(jQuery);
""",
    ["api_name", "option", "slug"],
)

ACTIVATOR_PHP: NamedTemplate = NamedTemplate(
    "wordpress.activator_php",
    """<?php
/**
 * Plugin Activator Class
 *
 * @package @@{prefix}_Integration
 */

// Prevent direct access
if (!defined('ABSPATH')) {
    exit;
}

class @@{prefix}_Activator {

    public static function activate() {
        self::create_tables();
        self::set_default_options();
        self::schedule_cron_jobs();
        flush_rewrite_rules();
        update_option('@@{option}_activated', true);
    }

    public static function deactivate() {
        self::clear_cron_jobs();
        flush_rewrite_rules();
        delete_option('@@{option}_activated');
    }

    private static function create_tables() {
        global $wpdb;

        $charset_collate = $wpdb->get_charset_collate();
        require_once ABSPATH . 'wp-admin/includes/upgrade.php';

        $cache_table = $wpdb->prefix . '@@{option}_cache';
        $cache_sql = "CREATE TABLE $cache_table (
            id int(11) NOT NULL AUTO_INCREMENT,
            cache_key varchar(32) NOT NULL,
            endpoint_id varchar(191) NOT NULL,
            response longtext NOT NULL,
            created_date datetime DEFAULT CURRENT_TIMESTAMP,
            expires_date datetime NOT NULL,
            PRIMARY KEY (id),
            UNIQUE KEY cache_key (cache_key),
            KEY expires_date (expires_date)
        ) $charset_collate;";
        dbDelta($cache_sql);
@@translation_table
    }

    private static function set_default_options() {
        $default_options = array(
            '@@{option}_api_key' => '',
            '@@{option}_base_url' => @@base_url,
            '@@{option}_enabled' => false,
            '@@{option}_cache_enabled' => true,
            '@@{option}_cache_duration' => 7,
            '@@{option}_rate_limit' => 100,
        );

        foreach ($default_options as $option => $value) {
            if (get_option($option) === false) {
                add_option($option, $value);
            }
        }
    }

    private static function schedule_cron_jobs() {
        if (!wp_next_scheduled('@@{option}_cleanup_cache')) {
            wp_schedule_event(time(), 'daily', '@@{option}_cleanup_cache');
        }
    }

    private static function clear_cron_jobs() {
        wp_clear_scheduled_hook('@@{option}_cleanup_cache');
    }
}

add_action('@@{option}_cleanup_cache', function () {
    global $wpdb;
    $table_name = $wpdb->prefix . '@@{option}_cache';
    $wpdb->query("DELETE FROM $table_name WHERE expires_date < NOW()");
});
""",
    ["prefix", "option", "base_url", "translation_table"],
)

TRANSLATION_TABLE: NamedTemplate = NamedTemplate(
    "wordpress.translation_table",
    """
        $translations_table = $wpdb->prefix . '@@{option}_translations';
        $translations_sql = "CREATE TABLE $translations_table (
            id int(11) NOT NULL AUTO_INCREMENT,
            post_id int(11) NOT NULL,
            original_text longtext NOT NULL,
            translated_text longtext NOT NULL,
            source_language varchar(10) NOT NULL,
            target_language varchar(10) NOT NULL,
            translation_date datetime DEFAULT CURRENT_TIMESTAMP,
            translation_hash varchar(32) NOT NULL,
            PRIMARY KEY (id),
            KEY post_id (post_id),
            KEY translation_hash (translation_hash),
            KEY languages (source_language, target_language)
        ) $charset_collate;";
        dbDelta($translations_sql);""",
    ["option"],
)

UNINSTALL_PHP: NamedTemplate = NamedTemplate(
    "wordpress.uninstall_php",
    """<?php
/**
 * Uninstall @@api_name Integration
 *
 * @package @@{prefix}_Integration
 */

if (!defined('WP_UNINSTALL_PLUGIN')) {
    exit;
}

global $wpdb;

$options = array(
@@options
);
foreach ($options as $option) {
    delete_option($option);
}

$tables = array(
@@tables
);
foreach ($tables as $table) {
    $wpdb->query("DROP TABLE IF EXISTS {$wpdb->prefix}{$table}");
}

wp_clear_scheduled_hook('@@{option}_cleanup_cache');
""",
    ["api_name", "prefix", "option", "options", "tables"],
)

DOCUMENTATION: NamedTemplate = NamedTemplate(
    "wordpress.documentation",
    """# @@api_name WordPress Plugin

@@description

## Installation

1. Upload the plugin files to the `/wp-content/plugins/@@slug` directory
2. Activate the plugin through the 'Plugins' screen in WordPress
3. Go to **@@menu_title** to configure your API credentials

## Configuration

### API Settings
1. Navigate to **@@menu_title**
2. Enter your @@api_name API key
3. Set the API base URL (default: `@@base_url`)
4. Test the connection to ensure it's working
5. Enable the integration

Credential: @@auth_summary
@@placeholder_note
## Features
@@feature_sections
## Shortcodes
@@shortcodes
## Widgets

The plugin includes a **@@api_name Widget** that can be added to any sidebar or widget area. Widget types:
@@widget_list

## API Integration

### Available Methods
@@method_list

## WordPress Hooks

### Actions
- `@@{option}_before_request` - Fired before every API request
- `@@{option}_request_failed` - Fired when an API request fails
@@extra_actions
### Filters
- `@@{option}_response` - Filter the decoded API response
@@extra_filters
## Database Tables

The plugin creates the following database tables:
@@tables

## Troubleshooting

### Common Issues

1. **API Connection Failed**
   - Verify your API key is correct
   - Check your server can make outbound HTTPS requests
   - Ensure your API key has sufficient quota

2. **Requests Return Errors**
   - Check if the plugin is enabled
   - Verify the base URL points at the right environment
   - Check the WordPress error logs

3. **Performance Issues**
   - Enable response caching in settings
   - Reduce the number of widgets calling the API on one page

## Security

The plugin implements WordPress security best practices:
- Nonce verification for all forms and AJAX requests
- Capability checks for admin functions
- Input sanitization and output escaping
@@security_list

## Performance

- Shortcode results are cached with transients
- AJAX requests keep admin pages responsive
- A daily cron job removes expired cache rows
""",
    [
        "api_name",
        "description",
        "slug",
        "menu_title",
        "base_url",
        "auth_summary",
        "placeholder_note",
        "feature_sections",
        "shortcodes",
        "widget_list",
        "method_list",
        "option",
        "extra_actions",
        "extra_filters",
        "tables",
        "security_list",
    ],
)

REGISTRY: TemplateRegistry = TemplateRegistry(
    [
        MAIN_PHP,
        API_SERVICE_PHP,
        ENDPOINT_METHOD,
        TRANSLATION_HELPERS,
        ADMIN_PHP,
        TRANSLATE_HANDLER,
        SHORTCODES_PHP,
        TRANSLATION_SHORTCODES,
        WIDGET_PHP,
        WIDGET_TRANSLATION_CASES,
        WIDGET_TRANSLATE_FORM,
        SETTINGS_PAGE_PHP,
        FEATURE_PAGE_PHP,
        FEATURE_FORM,
        ADMIN_CSS,
        ADMIN_JS,
        ACTIVATOR_PHP,
        TRANSLATION_TABLE,
        UNINSTALL_PHP,
        DOCUMENTATION,
    ]
)

__all__: List[str] = ["REGISTRY"]
