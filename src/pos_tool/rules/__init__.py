"""Rules subpackage - pricing scheme declarations and compiler."""
